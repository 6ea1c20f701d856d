"""Database model for registered names."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import Column
from sqlmodel import Field as ORMField, SQLModel

from ..core.database import UTCDateTime
from ..core.time import utcnow


class NameRecord(SQLModel, table=True):
    """A handle claimed for an address. ``name`` is stored without the display suffix."""

    __tablename__ = "names"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    name: str = ORMField(index=True, unique=True, nullable=False)
    address: str = ORMField(index=True, nullable=False)
    owner_signature: Optional[str] = None
    registered_at: datetime = ORMField(
        default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False)
    )
    updated_at: datetime = ORMField(
        default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False)
    )
    expires_at: Optional[datetime] = ORMField(
        default=None, sa_column=Column(UTCDateTime(), nullable=True)
    )
    metadata_json: Optional[str] = None

    @property
    def meta(self) -> Optional[Dict[str, str]]:
        if not self.metadata_json:
            return None
        try:
            return json.loads(self.metadata_json)
        except ValueError:
            return None


__all__ = ["NameRecord"]
