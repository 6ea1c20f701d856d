"""
Resolver Client
Caching client for wallets and explorers that turns handles into addresses.

Every public method degrades to ``None``, an empty list, ``False`` or the
caller's own input when the registry is unreachable or answers with an
error; failures are logged, never raised.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional
from urllib.parse import quote

import httpx

from ..core.config import DISPLAY_SUFFIX
from ..core.logging import get_logger
from ..services.validation import ADDRESS_MIN_LENGTH, is_valid_name, normalize_name
from .cache import DEFAULT_TTL_SECONDS, TTLCache

log = get_logger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:3000/api"
SHORT_ADDRESS_EDGE = 7

_MISS = object()
_SOFT_FAILURES = (httpx.HTTPError, ValueError, KeyError, TypeError)


class ResolverClient:
    """Read-through cached access to the registry's lookup endpoints."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.cache = cache if cache is not None else TTLCache(ttl=ttl, clock=clock)
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.api_url, timeout=self.timeout, transport=self._transport
        ) as client:
            return await client.get(path)

    @staticmethod
    def is_xrs_name(value: Optional[str]) -> bool:
        """True for ``*.xrs`` input or a bare handle the registry would accept."""

        if not value:
            return False
        return value.endswith(DISPLAY_SUFFIX) or is_valid_name(value)

    async def resolve(self, name: Optional[str]) -> Optional[str]:
        """Return the address for ``name``, or ``None`` if unknown or unreachable."""

        if not name:
            return None
        clean = normalize_name(name)
        key = f"name:{clean}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            response = await self._get(f"/resolve/{quote(clean, safe='')}")
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            address = response.json()["address"]
        except _SOFT_FAILURES as exc:
            log.warning("resolve_failed", name=clean, error=str(exc))
            return None

        self.cache.set(key, address)
        return address

    async def reverse(self, address: Optional[str]) -> List[str]:
        """Display names owned by ``address``, oldest registration first."""

        if not address:
            return []
        key = f"addr:{address}"
        cached = self.cache.get(key, _MISS)
        if cached is not _MISS:
            return list(cached)

        try:
            response = await self._get(f"/reverse/{quote(address, safe='')}")
            if response.status_code == httpx.codes.NOT_FOUND:
                return []
            response.raise_for_status()
            names = [entry["name"] for entry in response.json()["names"]]
        except _SOFT_FAILURES as exc:
            log.warning("reverse_failed", address=address, error=str(exc))
            return []

        self.cache.set(key, names)
        return list(names)

    async def get_primary_name(self, address: Optional[str]) -> Optional[str]:
        names = await self.reverse(address)
        return names[0] if names else None

    async def resolve_to_address(self, value: Optional[str]) -> str:
        """Accept a handle or an address and return an address.

        Unresolvable handles come back unchanged, so non-empty input never
        yields an empty string.
        """

        if not value:
            return ""
        if len(value) > ADDRESS_MIN_LENGTH and "." not in value:
            return value
        if self.is_xrs_name(value):
            return await self.resolve(value) or value
        return value

    async def to_display_string(self, address: Optional[str], full: bool = False) -> str:
        """Primary handle when one exists, otherwise the (shortened) address."""

        if not address:
            return ""
        name = await self.get_primary_name(address)
        if name:
            return name
        if full:
            return address
        return f"{address[:SHORT_ADDRESS_EDGE]}...{address[-SHORT_ADDRESS_EDGE:]}"

    async def check_availability(self, name: Optional[str]) -> bool:
        """Ask the registry whether ``name`` is free; any failure reads as taken."""

        if not name:
            return False
        clean = normalize_name(name)
        try:
            response = await self._get(f"/check/{quote(clean, safe='')}")
            response.raise_for_status()
            return bool(response.json()["available"])
        except _SOFT_FAILURES as exc:
            log.warning("availability_check_failed", name=clean, error=str(exc))
            return False

    def clear_cache(self) -> None:
        self.cache.clear()


__all__ = ["DEFAULT_API_URL", "ResolverClient"]
