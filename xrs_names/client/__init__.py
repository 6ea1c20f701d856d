"""Client-side resolution helpers for registry integrators."""

from .cache import DEFAULT_TTL_SECONDS, TTLCache
from .resolver import DEFAULT_API_URL, ResolverClient

__all__ = ["DEFAULT_API_URL", "DEFAULT_TTL_SECONDS", "ResolverClient", "TTLCache"]
