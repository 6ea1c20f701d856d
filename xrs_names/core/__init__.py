"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    DISPLAY_SUFFIX,
    HOST,
    MAX_BODY_BYTES,
    PORT,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_GENERAL,
    RATE_LIMIT_GENERAL_WINDOW,
    RATE_LIMIT_REGISTER,
    RATE_LIMIT_REGISTER_WINDOW,
    SECURITY_HEADERS,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from .database import build_engine, engine, get_session
from .logging import get_logger, setup_logging
from .time import isoformat_z, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_RESET",
    "DISPLAY_SUFFIX",
    "HOST",
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
    "build_engine",
    "engine",
    "get_logger",
    "get_session",
    "isoformat_z",
    "setup_logging",
    "utcnow",
]
