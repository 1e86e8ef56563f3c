"""SQLAlchemy implementation of the identity cache store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, insert, select

from arrsync.domain.ports.persistence import IdentityCacheStore

from .engine import session_factory as default_session_factory
from .mappings import identity_cache_table

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session, sessionmaker

    from arrsync.domain.records import RecordKind


class SqlAlchemyIdentityCacheStore(IdentityCacheStore):
    """Identity cache persisted in one table.

    Every write commits on its own so a run that fails part way keeps the ids
    it already learned.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or default_session_factory()

    def lookup(self, instance: str, kind: RecordKind, key: str) -> int | None:
        statement = select(identity_cache_table.c.remote_id).where(
            _scope(instance, kind), identity_cache_table.c.key == key
        )
        with self._session_factory() as session:
            return session.execute(statement).scalar_one_or_none()

    def store(self, instance: str, kind: RecordKind, key: str, remote_id: int) -> None:
        with self._session_factory.begin() as session:
            session.execute(
                delete(identity_cache_table).where(
                    _scope(instance, kind), identity_cache_table.c.key == key
                )
            )
            session.execute(
                insert(identity_cache_table).values(
                    instance=instance,
                    kind=kind,
                    key=key,
                    remote_id=remote_id,
                )
            )

    def remove(self, instance: str, kind: RecordKind, key: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(
                delete(identity_cache_table).where(
                    _scope(instance, kind), identity_cache_table.c.key == key
                )
            )

    def entries(self, instance: str, kind: RecordKind) -> dict[str, int]:
        statement = (
            select(identity_cache_table.c.key, identity_cache_table.c.remote_id)
            .where(_scope(instance, kind))
            .order_by(identity_cache_table.c.key)
        )
        with self._session_factory() as session:
            return {key: remote_id for key, remote_id in session.execute(statement)}


def _scope(instance: str, kind: RecordKind) -> ColumnElement[bool]:
    return and_(
        identity_cache_table.c.instance == instance,
        identity_cache_table.c.kind == kind,
    )
