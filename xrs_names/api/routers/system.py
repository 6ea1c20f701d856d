"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...core import SERVICE_NAME, SERVICE_VERSION
from ...services import RegistryService
from ..deps import get_registry

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health() -> Dict[str, str]:
    """Simple readiness probe."""

    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/stats")
def stats(registry: RegistryService = Depends(get_registry)) -> Dict[str, Any]:
    """Registry-wide counters."""

    result = registry.stats()
    return {
        "total_names": result.total_names,
        "unique_owners": result.unique_owners,
        "service": f"{SERVICE_NAME} - Public Good",
        "version": SERVICE_VERSION,
    }


__all__ = ["router"]
