"""Pure validation and normalisation rules for handles, addresses and metadata."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from ..core.config import DISPLAY_SUFFIX

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 32
ADDRESS_MIN_LENGTH = 32
ADDRESS_MAX_LENGTH = 64
SEARCH_MIN_LENGTH = 2
SEARCH_MAX_LENGTH = 32
METADATA_FIELDS = ("description", "avatar", "website", "email")
METADATA_MAX_LENGTH = 256

_NAME_RE = re.compile(r"^[a-z0-9]([a-z0-9-]{1,30}[a-z0-9])?$")
_ADDRESS_RE = re.compile(r"^[A-Za-z0-9]+$")
_SEARCH_STRIP_RE = re.compile(r"[^a-z0-9-]")


def strip_suffix(raw: str) -> str:
    """Drop any trailing display suffix; repeated suffixes are all removed."""

    while raw.endswith(DISPLAY_SUFFIX):
        raw = raw[: -len(DISPLAY_SUFFIX)]
    return raw


def normalize_name(raw: str) -> str:
    """Lowercase and strip the display suffix. Idempotent."""

    return strip_suffix(raw.lower())


def display_name(name: str) -> str:
    return f"{name}{DISPLAY_SUFFIX}"


def is_valid_name(raw: Any) -> bool:
    """Check a handle, tolerating a trailing display suffix.

    Case is not folded here: callers normalise first, so uppercase input that
    reaches the validator is rejected.
    """

    if not isinstance(raw, str):
        return False
    name = strip_suffix(raw)
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        return False
    return bool(_NAME_RE.match(name)) and "--" not in name


def is_valid_address(raw: Any) -> bool:
    if not isinstance(raw, str):
        return False
    if not ADDRESS_MIN_LENGTH <= len(raw) <= ADDRESS_MAX_LENGTH:
        return False
    return bool(_ADDRESS_RE.match(raw))


def sanitize_metadata(raw: Any) -> Optional[Dict[str, str]]:
    """Keep only allow-listed string fields of bounded length.

    Returns ``None`` for non-mapping input and when nothing survives filtering.
    """

    if not isinstance(raw, dict):
        return None
    sanitized: Dict[str, str] = {}
    for key in METADATA_FIELDS:
        value = raw.get(key)
        if isinstance(value, str) and value and len(value) <= METADATA_MAX_LENGTH:
            sanitized[key] = value
    return sanitized or None


def sanitize_search_query(raw: str) -> str:
    return _SEARCH_STRIP_RE.sub("", raw.lower())


__all__ = [
    "METADATA_FIELDS",
    "display_name",
    "is_valid_address",
    "is_valid_name",
    "normalize_name",
    "sanitize_metadata",
    "sanitize_search_query",
    "strip_suffix",
]
