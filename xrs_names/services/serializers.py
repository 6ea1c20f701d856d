"""Serialise registry objects to API-friendly dicts."""

from __future__ import annotations

from typing import Any, Dict

from ..core.time import isoformat_z
from ..models import NameRecord
from .validation import display_name


def record_summary(record: NameRecord) -> Dict[str, Any]:
    """Listing shape used by search, recent and directory."""

    return {
        "name": display_name(record.name),
        "address": record.address,
        "registered": isoformat_z(record.registered_at),
    }


def record_to_dict(record: NameRecord) -> Dict[str, Any]:
    """Resolution shape: listing fields plus metadata."""

    return {**record_summary(record), "metadata": record.meta}


__all__ = ["record_summary", "record_to_dict"]
