"""SQLAlchemy table metadata for the identity cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import Column, Enum, Integer, MetaData, PrimaryKeyConstraint, String, Table

from arrsync.domain.records import RecordKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

identity_cache_table = Table(
    "identity_cache",
    metadata,
    Column("instance", String, nullable=False),
    Column("kind", Enum(RecordKind, native_enum=False), nullable=False),
    Column("key", String, nullable=False),
    Column("remote_id", Integer, nullable=False),
    PrimaryKeyConstraint("instance", "kind", "key"),
)


def create_all_tables(engine: Engine) -> None:
    log.debug("Ensuring identity cache tables exist")
    metadata.create_all(engine, checkfirst=True)
