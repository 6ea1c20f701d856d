"""Name lookup, registration and update endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from ...core import isoformat_z
from ...core.rate_limit import limit_registrations
from ...services import RegistryService, display_name
from ...services.serializers import record_to_dict
from ..deps import get_registry

router = APIRouter(prefix="/api", tags=["names"])


@router.get("/check/{name}")
def check_name(name: str, registry: RegistryService = Depends(get_registry)) -> Dict[str, Any]:
    """Report whether a handle is free to register."""

    result = registry.check_availability(name)
    return {"name": display_name(result.name), "available": result.available}


@router.get("/resolve/{name}")
def resolve_name(name: str, registry: RegistryService = Depends(get_registry)) -> Dict[str, Any]:
    """Resolve a handle to its address."""

    return record_to_dict(registry.resolve(name))


@router.get("/reverse/{address}")
def reverse_lookup(
    address: str, registry: RegistryService = Depends(get_registry)
) -> Dict[str, Any]:
    """List every handle pointing at an address, oldest first."""

    result = registry.reverse_lookup(address)
    return {
        "address": result.address,
        "names": [
            {"name": display_name(record.name), "registered": isoformat_z(record.registered_at)}
            for record in result.names
        ],
        "primary": display_name(result.primary) if result.primary else None,
    }


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_registrations)],
)
def register_name(
    body: Dict[str, Any] = Body(...),
    registry: RegistryService = Depends(get_registry),
) -> Dict[str, Any]:
    """Claim a new handle for an address."""

    record = registry.register(
        body.get("name"),
        body.get("address"),
        signature=body.get("signature"),
        metadata=body.get("metadata"),
    )
    return {
        "success": True,
        "name": display_name(record.name),
        "address": record.address,
        "registered": isoformat_z(record.registered_at),
    }


@router.put("/update/{name}")
def update_name(
    name: str,
    body: Dict[str, Any] = Body(...),
    registry: RegistryService = Depends(get_registry),
) -> Dict[str, Any]:
    """Point an existing handle at a new address."""

    result = registry.update(name, body.get("address"), body.get("signature"))
    return {
        "success": True,
        "name": display_name(result.name),
        "address": result.address,
        "updated": isoformat_z(result.updated_at),
    }


__all__ = ["router"]
