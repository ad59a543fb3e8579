from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from kentekenpy.adapters.sqlalchemy import start_mappers
from kentekenpy.adapters.sqlalchemy.migrations import upgrade_head
from kentekenpy.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySavedVehicleUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RDW_BASE_URL",
        "RDW_APP_TOKEN",
        "RDW_TIMEOUT_SECONDS",
        "RDW_MAX_RETRIES",
        "RDW_RATE_LIMIT",
        "RDW_HTTP_CACHE",
        "RDW_HTTP_CACHE_TTL",
        "KENTEKENPY_DISPATCH_DELAY",
        "KENTEKENPY_BATCH_SIZE",
        "KENTEKENPY_USER",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemySavedVehicleUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemySavedVehicleUnitOfWork:
        return SqlAlchemySavedVehicleUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
