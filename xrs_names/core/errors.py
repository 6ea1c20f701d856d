"""Error hierarchy for registry operations.

Every error carries an HTTP ``status_code``, a stable ``code`` and a
human-readable message. ``to_body()`` produces the JSON payload returned to
clients: ``{"error": message, **details}``.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

NAME_RULES = "3-32 characters, lowercase letters, numbers, hyphens (no consecutive hyphens)"


class RegistryError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message: str, *, details: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


class InvalidInput(RegistryError):
    status_code = 400
    code = "invalid_input"

    @classmethod
    def name_format(cls) -> "InvalidInput":
        return cls("Invalid name format", details={"rules": NAME_RULES})

    @classmethod
    def address_format(cls) -> "InvalidInput":
        return cls("Invalid address format")


class Unauthorized(RegistryError):
    status_code = 401
    code = "unauthorized"


class NameNotFound(RegistryError):
    status_code = 404
    code = "not_found"

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__("Name not found", details={"name": name} if name else None)


class NameConflict(RegistryError):
    status_code = 409
    code = "conflict"

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__("Name already registered", details={"name": name} if name else None)


class StorageFailure(RegistryError):
    """Persistence-layer failure; the underlying cause is logged, never returned."""

    status_code = 500
    code = "storage_failure"

    def __init__(self, operation: str) -> None:
        super().__init__("Database error")
        self.operation = operation


__all__ = [
    "InvalidInput",
    "NAME_RULES",
    "NameConflict",
    "NameNotFound",
    "RegistryError",
    "StorageFailure",
    "Unauthorized",
]
