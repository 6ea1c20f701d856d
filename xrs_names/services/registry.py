"""Registry orchestration: validate, normalise, then read or write the store.

Every name-shaped input is normalised (lowercased, suffix stripped) before it
reaches the store, so ``Alice.xrs``, ``alice.xrs`` and ``alice`` all address
the same record.
"""

from __future__ import annotations

import json
import math
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterator, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import InvalidInput, NameNotFound, StorageFailure, Unauthorized
from ..core.logging import get_logger
from ..core.time import utcnow
from ..models import NameRecord
from .store import RegistryStore
from .validation import (
    SEARCH_MAX_LENGTH,
    SEARCH_MIN_LENGTH,
    display_name,
    is_valid_address,
    is_valid_name,
    normalize_name,
    sanitize_metadata,
    sanitize_search_query,
)

log = get_logger(__name__)

SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT = 20, 100
RECENT_DEFAULT_LIMIT, RECENT_MAX_LIMIT = 10, 50
DIRECTORY_DEFAULT_LIMIT, DIRECTORY_MAX_LIMIT = 50, 100


@dataclass(frozen=True)
class Availability:
    name: str
    available: bool


@dataclass(frozen=True)
class ReverseLookup:
    address: str
    names: List[NameRecord]
    primary: Optional[str]


@dataclass(frozen=True)
class UpdateResult:
    name: str
    address: str
    updated_at: datetime


@dataclass(frozen=True)
class DirectoryPage:
    entries: List[NameRecord]
    total: int
    page: int
    pages: int


@dataclass(frozen=True)
class RegistryStats:
    total_names: int
    unique_owners: int


def clamp(value: Optional[int], default: int, low: int, high: int) -> int:
    if value is None:
        return default
    return min(max(value, low), high)


def _name_from(raw: Any) -> str:
    if not isinstance(raw, str):
        raise InvalidInput.name_format()
    name = normalize_name(raw)
    if not is_valid_name(name):
        raise InvalidInput.name_format()
    return name


def _address_from(raw: Any) -> str:
    if not is_valid_address(raw):
        raise InvalidInput.address_format()
    return raw


class RegistryService:
    def __init__(self, store: RegistryStore, clock: Callable[[], datetime] = utcnow) -> None:
        self.store = store
        self.clock = clock

    @contextmanager
    def _storage(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            log.error("storage_failure", operation=operation, error=str(exc))
            raise StorageFailure(operation) from exc

    # Reads ----------------------------------------------------------------

    def check_availability(self, raw_name: Any) -> Availability:
        name = _name_from(raw_name)
        with self._storage("check"):
            record = self.store.find_by_name(name)
        return Availability(name=name, available=record is None)

    def resolve(self, raw_name: Any) -> NameRecord:
        name = _name_from(raw_name)
        with self._storage("resolve"):
            record = self.store.find_by_name(name)
        if record is None:
            raise NameNotFound(display_name(name))
        return record

    def reverse_lookup(self, raw_address: Any) -> ReverseLookup:
        address = _address_from(raw_address)
        with self._storage("reverse"):
            records = list(self.store.find_by_address(address))
        primary = records[0].name if records else None
        return ReverseLookup(address=address, names=records, primary=primary)

    def search(self, raw_query: Any, limit: Optional[int] = None) -> tuple[str, Sequence[NameRecord]]:
        """Prefix search; returns the sanitised query alongside the matches."""

        if (
            not isinstance(raw_query, str)
            or not SEARCH_MIN_LENGTH <= len(raw_query) <= SEARCH_MAX_LENGTH
        ):
            raise InvalidInput(f"Query must be {SEARCH_MIN_LENGTH}-{SEARCH_MAX_LENGTH} characters")
        query = sanitize_search_query(raw_query)
        if len(query) < SEARCH_MIN_LENGTH:
            raise InvalidInput("Query too short after sanitization")

        limit = clamp(limit, SEARCH_DEFAULT_LIMIT, 1, SEARCH_MAX_LIMIT)
        with self._storage("search"):
            return query, self.store.search_by_prefix(query, limit)

    def recent(self, limit: Optional[int] = None) -> Sequence[NameRecord]:
        limit = clamp(limit, RECENT_DEFAULT_LIMIT, 1, RECENT_MAX_LIMIT)
        with self._storage("recent"):
            return self.store.list_recent(limit)

    def directory(self, page: Optional[int] = None, limit: Optional[int] = None) -> DirectoryPage:
        page = max(page or 1, 1)
        limit = clamp(limit, DIRECTORY_DEFAULT_LIMIT, 1, DIRECTORY_MAX_LIMIT)
        offset = (page - 1) * limit
        entries: Sequence[NameRecord] = []
        with self._storage("directory"):
            total = self.store.count_all()
            if offset < total:
                entries, total = self.store.list_page(offset, limit)
        return DirectoryPage(
            entries=list(entries),
            total=total,
            page=page,
            pages=math.ceil(total / limit),
        )

    def stats(self) -> RegistryStats:
        with self._storage("stats"):
            return RegistryStats(
                total_names=self.store.count_all(),
                unique_owners=self.store.count_distinct_addresses(),
            )

    # Writes ---------------------------------------------------------------

    def register(
        self,
        raw_name: Any,
        raw_address: Any,
        signature: Optional[str] = None,
        metadata: Any = None,
    ) -> NameRecord:
        if not raw_name or not raw_address:
            raise InvalidInput("Name and address are required")
        name = _name_from(raw_name)
        address = _address_from(raw_address)
        sanitized = sanitize_metadata(metadata)

        record = NameRecord(
            name=name,
            address=address,
            owner_signature=signature if isinstance(signature, str) and signature else None,
            metadata_json=json.dumps(sanitized) if sanitized else None,
        )
        # The store's unique constraint decides races; NameConflict passes through.
        with self._storage("register"):
            record = self.store.insert(record, self.clock())
        log.info("name_registered", name=name, address=address)
        return record

    def update(self, raw_name: Any, raw_address: Any, signature: Any) -> UpdateResult:
        name = _name_from(raw_name)
        address = _address_from(raw_address)
        # TODO: verify the signature over name+address+timestamp against the
        # current owner's public key; only its presence is checked today.
        if not isinstance(signature, str) or not signature:
            raise Unauthorized("Signature required for updates")

        now = self.clock()
        with self._storage("update"):
            rows = self.store.update_address(name, address, now)
        if rows == 0:
            raise NameNotFound(display_name(name))
        log.info("name_updated", name=name, address=address)
        return UpdateResult(name=name, address=address, updated_at=now)


__all__ = [
    "Availability",
    "DirectoryPage",
    "RegistryService",
    "RegistryStats",
    "ReverseLookup",
    "UpdateResult",
    "clamp",
]
