"""Service layer helpers."""

from .registry import (
    Availability,
    DirectoryPage,
    RegistryService,
    RegistryStats,
    ReverseLookup,
    UpdateResult,
)
from .store import RegistryStore, SQLRegistryStore
from .validation import (
    display_name,
    is_valid_address,
    is_valid_name,
    normalize_name,
    sanitize_metadata,
    sanitize_search_query,
)

__all__ = [
    "Availability",
    "DirectoryPage",
    "RegistryService",
    "RegistryStats",
    "RegistryStore",
    "ReverseLookup",
    "SQLRegistryStore",
    "UpdateResult",
    "display_name",
    "is_valid_address",
    "is_valid_name",
    "normalize_name",
    "sanitize_metadata",
    "sanitize_search_query",
]
