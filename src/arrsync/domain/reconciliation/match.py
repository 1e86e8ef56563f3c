"""Resolve desired records to their remote counterparts.

Cached identity wins over name matching so that renamed records keep their
remote id; name matching lets a first run adopt remote records that already
exist. Deletion candidates are resolved by id only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from arrsync.domain.ports.persistence import IdentityLookup
    from arrsync.domain.records import DesiredRecord, RemoteRecord


def match_remote_record(
    record: DesiredRecord,
    remote_records: Iterable[RemoteRecord],
    cache: IdentityLookup,
    *,
    match_by_name: bool = True,
) -> RemoteRecord | None:
    """Return the remote record ``record`` maps to, or ``None``."""

    candidates = list(remote_records)
    cached_id = cache.lookup(record.key)
    if cached_id is not None:
        match = find_remote_by_id(candidates, cached_id)
        if match is not None:
            return match

    if not match_by_name:
        return None
    return find_remote_by_name(candidates, record.name)


def find_remote_by_id(
    remote_records: Iterable[RemoteRecord],
    remote_id: int,
) -> RemoteRecord | None:
    return next((remote for remote in remote_records if remote.id == remote_id), None)


def find_remote_by_name(remote_records: Iterable[RemoteRecord], name: str) -> RemoteRecord | None:
    wanted = name.casefold()
    return next((remote for remote in remote_records if remote.name.casefold() == wanted), None)
