"""Search and browsing endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ...services import RegistryService
from ...services.serializers import record_summary
from ..deps import get_registry, parse_int

router = APIRouter(prefix="/api", tags=["directory"])


@router.get("/search")
def search_names(
    q: Optional[str] = None,
    limit: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
) -> Dict[str, Any]:
    """Prefix search over registered handles."""

    query, results = registry.search(q, parse_int(limit))
    return {"query": query, "results": [record_summary(record) for record in results]}


@router.get("/recent")
def recent_names(
    limit: Optional[str] = None, registry: RegistryService = Depends(get_registry)
) -> Dict[str, Any]:
    """Newest registrations first."""

    return {"recent": [record_summary(record) for record in registry.recent(parse_int(limit))]}


@router.get("/directory")
def list_directory(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
) -> Dict[str, Any]:
    """Alphabetical, paginated listing of every handle."""

    result = registry.directory(parse_int(page), parse_int(limit))
    return {
        "entries": [record_summary(record) for record in result.entries],
        "total": result.total,
        "page": result.page,
        "pages": result.pages,
    }


__all__ = ["router"]
