"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel
from starlette.middleware.base import BaseHTTPMiddleware

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DB_RESET,
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
    engine as default_engine,
    get_logger,
    setup_logging,
)
from .core.rate_limit import (
    GENERAL_LIMIT_MESSAGE,
    SlidingWindowLimiter,
    client_key,
    retry_after_header,
)

log = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_bytes: int) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            return JSONResponse(
                {"error": "Request body too large"},
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
        return await call_next(request)


class GeneralRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP admission control for every ``/api/`` route."""

    async def dispatch(self, request: Request, call_next):
        limiter: Optional[SlidingWindowLimiter] = getattr(
            request.app.state, "general_limiter", None
        )
        if limiter is not None and request.url.path.startswith("/api/"):
            key = client_key(request)
            allowed, retry_after = limiter.hit(key)
            if not allowed:
                log.warning("rate_limited", client=key, path=request.url.path)
                return JSONResponse(
                    {"error": GENERAL_LIMIT_MESSAGE},
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    headers=retry_after_header(retry_after),
                )
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine: Engine = app.state.engine
    if DB_RESET:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


def create_app(
    engine: Optional[Engine] = None,
    *,
    rate_limit_enabled: Optional[bool] = None,
) -> FastAPI:
    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, lifespan=lifespan)
    app.state.engine = engine if engine is not None else default_engine

    enabled = RATE_LIMIT_ENABLED if rate_limit_enabled is None else rate_limit_enabled
    app.state.general_limiter = (
        SlidingWindowLimiter(RATE_LIMIT_GENERAL, RATE_LIMIT_GENERAL_WINDOW) if enabled else None
    )
    app.state.register_limiter = (
        SlidingWindowLimiter(RATE_LIMIT_REGISTER, RATE_LIMIT_REGISTER_WINDOW) if enabled else None
    )

    app.add_middleware(GeneralRateLimitMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )

    register_routes(app)
    return app


setup_logging()
app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("xrs_names.app:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
