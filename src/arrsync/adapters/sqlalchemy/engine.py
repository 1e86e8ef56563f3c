"""Process-wide engine for the identity cache database."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from arrsync.config.storage import get_database_uri

from .mappings import create_all_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the cache database is used before ``startup`` or started twice."""


@dataclass(slots=True)
class _EngineState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_STATE = _EngineState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one) and create missing tables."""

    if _STATE.engine is not None and not force:
        raise StartupError("Identity cache database already started; pass force=True")
    if force and _STATE.engine is not None and _STATE.engine is not engine:
        shutdown()

    resolved = engine or create_engine(database_uri or get_database_uri())
    create_all_tables(resolved)
    _STATE.engine = resolved
    _STATE.sessions = sessionmaker(bind=resolved, expire_on_commit=False)
    log.debug("Identity cache database ready at %s", resolved.url)


def session_factory() -> sessionmaker[Session]:
    if _STATE.sessions is None:
        raise StartupError(
            "Identity cache database not started; call arrsync.adapters.sqlalchemy.startup()"
        )
    return _STATE.sessions


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.sessions = None
