"""Aggregate API routers."""

from fastapi import APIRouter

from .directory import router as directory_router
from .names import router as names_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    names_router,
    directory_router,
)

__all__ = ["ALL_ROUTERS"]
