"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Service identity -----------------------------------------------------------
SERVICE_NAME = "XRS Names"
SERVICE_VERSION = "1.1.0"
DISPLAY_SUFFIX = ".xrs"

# Sent on every response, including unhandled 500s.
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src 'self' https://fonts.gstatic.com; img-src 'self' data:"
    ),
}


# Storage --------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = Path(os.getenv("DATA_DIR", str(_PROJECT_ROOT / "data")))

# DB_PATH is the older single-file setting; DATABASE_URL wins when both are set.
_db_path = os.getenv("DB_PATH")
DATABASE_URL = os.getenv("DATABASE_URL") or (
    f"sqlite:///{_db_path}" if _db_path else f"sqlite:///{DATA_DIR / 'xrs-names.db'}"
)
DB_RESET = _env_bool("DB_RESET", False)


# HTTP surface ---------------------------------------------------------------
# CORS_ORIGINS is a comma-separated list; unset means any origin.
ALLOWED_CORS_ORIGINS = _unique(_split_csv(os.getenv("CORS_ORIGINS"))) or ["*"]

MAX_BODY_BYTES = _env_int("MAX_BODY_BYTES", 10 * 1024)

RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
RATE_LIMIT_GENERAL = _env_int("RATE_LIMIT_GENERAL", 100)
RATE_LIMIT_GENERAL_WINDOW = _env_int("RATE_LIMIT_GENERAL_WINDOW", 15 * 60)
RATE_LIMIT_REGISTER = _env_int("RATE_LIMIT_REGISTER", 10)
RATE_LIMIT_REGISTER_WINDOW = _env_int("RATE_LIMIT_REGISTER_WINDOW", 60 * 60)

HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 3000)


# Logging --------------------------------------------------------------------
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
LOG_FORMAT = (os.getenv("LOG_FORMAT") or "json").lower()


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DATA_DIR",
    "DB_RESET",
    "DISPLAY_SUFFIX",
    "HOST",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "MAX_BODY_BYTES",
    "PORT",
    "RATE_LIMIT_ENABLED",
    "RATE_LIMIT_GENERAL",
    "RATE_LIMIT_GENERAL_WINDOW",
    "RATE_LIMIT_REGISTER",
    "RATE_LIMIT_REGISTER_WINDOW",
    "SECURITY_HEADERS",
    "SERVICE_NAME",
    "SERVICE_VERSION",
]
