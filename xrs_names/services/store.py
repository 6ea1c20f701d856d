"""Registry persistence.

``RegistryStore`` is the contract the service depends on. ``SQLRegistryStore``
implements it over any SQLAlchemy engine (embedded SQLite file or a
client/server database); which one is used is decided by ``DATABASE_URL``.

Name uniqueness is enforced by the ``UNIQUE`` constraint on ``names.name``.
``insert`` never checks before writing: when two writers race for the same
name the database rejects the second and the store raises ``NameConflict``.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import NameConflict
from ..models import NameRecord
from .validation import display_name


class RegistryStore(Protocol):
    def insert(self, record: NameRecord, now: datetime) -> NameRecord: ...

    def find_by_name(self, name: str) -> Optional[NameRecord]: ...

    def find_by_address(self, address: str) -> Sequence[NameRecord]: ...

    def update_address(self, name: str, address: str, now: datetime) -> int: ...

    def search_by_prefix(self, prefix: str, limit: int) -> Sequence[NameRecord]: ...

    def list_recent(self, limit: int) -> Sequence[NameRecord]: ...

    def list_page(self, offset: int, limit: int) -> Tuple[Sequence[NameRecord], int]: ...

    def count_all(self) -> int: ...

    def count_distinct_addresses(self) -> int: ...


class SQLRegistryStore:
    """``RegistryStore`` backed by a SQLModel session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, record: NameRecord, now: datetime) -> NameRecord:
        name = record.name
        record.registered_at = now
        record.updated_at = now
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise NameConflict(display_name(name)) from exc
        self.session.refresh(record)
        return record

    def find_by_name(self, name: str) -> Optional[NameRecord]:
        return self.session.exec(select(NameRecord).where(NameRecord.name == name)).first()

    def find_by_address(self, address: str) -> List[NameRecord]:
        return list(
            self.session.exec(
                select(NameRecord)
                .where(NameRecord.address == address)
                .order_by(NameRecord.registered_at.asc(), NameRecord.id.asc())
            ).all()
        )

    def update_address(self, name: str, address: str, now: datetime) -> int:
        result = self.session.exec(
            update(NameRecord)
            .where(NameRecord.name == name)
            .values(address=address, updated_at=now)
        )
        self.session.commit()
        return result.rowcount

    def search_by_prefix(self, prefix: str, limit: int) -> List[NameRecord]:
        return list(
            self.session.exec(
                select(NameRecord)
                .where(NameRecord.name.startswith(prefix, autoescape=True))
                .order_by(NameRecord.registered_at.asc(), NameRecord.id.asc())
                .limit(limit)
            ).all()
        )

    def list_recent(self, limit: int) -> List[NameRecord]:
        return list(
            self.session.exec(
                select(NameRecord)
                .order_by(NameRecord.registered_at.desc(), NameRecord.id.desc())
                .limit(limit)
            ).all()
        )

    def list_page(self, offset: int, limit: int) -> Tuple[List[NameRecord], int]:
        entries = list(
            self.session.exec(
                select(NameRecord).order_by(NameRecord.name.asc()).offset(offset).limit(limit)
            ).all()
        )
        return entries, self.count_all()

    def count_all(self) -> int:
        return self.session.exec(select(func.count(NameRecord.id))).one()

    def count_distinct_addresses(self) -> int:
        return self.session.exec(select(func.count(func.distinct(NameRecord.address)))).one()


__all__ = ["RegistryStore", "SQLRegistryStore"]
