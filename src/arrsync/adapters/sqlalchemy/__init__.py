"""SQLAlchemy adapter package for arrsync."""

from __future__ import annotations

from .engine import StartupError, is_started, shutdown, startup
from .identity_cache import SqlAlchemyIdentityCacheStore
from .mappings import create_all_tables, identity_cache_table, metadata

__all__ = [
    "SqlAlchemyIdentityCacheStore",
    "StartupError",
    "create_all_tables",
    "identity_cache_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
