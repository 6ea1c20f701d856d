"""Shared request dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from sqlmodel import Session

from ..core import get_session
from ..services import RegistryService, SQLRegistryStore


def get_registry(session: Session = Depends(get_session)) -> RegistryService:
    """Registry service bound to the request's database session."""

    return RegistryService(SQLRegistryStore(session))


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Lenient integer parsing for query strings; junk means "use the default"."""

    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


__all__ = ["get_registry", "parse_int"]
