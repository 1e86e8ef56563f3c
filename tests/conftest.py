from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from arrsync.adapters.sqlalchemy import SqlAlchemyIdentityCacheStore, create_all_tables
from arrsync.adapters.sqlalchemy.engine import shutdown, startup
from tests.helpers.servarr import FakeRemoteClient, InMemoryIdentityCacheStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def sqlite_cache_store(
    sqlite_session_factory: sessionmaker[Session],
) -> SqlAlchemyIdentityCacheStore:
    return SqlAlchemyIdentityCacheStore(sqlite_session_factory)


@pytest.fixture
def started_adapter(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def cache_store() -> InMemoryIdentityCacheStore:
    return InMemoryIdentityCacheStore()


@pytest.fixture
def remote_client() -> FakeRemoteClient:
    return FakeRemoteClient()
