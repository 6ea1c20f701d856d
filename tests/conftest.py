from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest

# Keep the module-level default app off the on-disk database.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FORMAT", "console")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from xrs_names import models  # noqa: E402,F401
from xrs_names.app import create_app  # noqa: E402
from xrs_names.core import build_engine  # noqa: E402
from xrs_names.services import RegistryService, SQLRegistryStore  # noqa: E402

class StepClock:
    """Deterministic UTC clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Fresh in-memory database shared across threads via a static pool."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session: Session) -> SQLRegistryStore:
    return SQLRegistryStore(session)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def registry(store: SQLRegistryStore, clock: StepClock) -> RegistryService:
    return RegistryService(store, clock=clock)


@pytest.fixture
def app(engine: Engine) -> FastAPI:
    return create_app(engine, rate_limit_enabled=False)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
