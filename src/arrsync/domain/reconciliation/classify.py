"""Classify desired records into New/Updated/Unchanged/Deleted transactions."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from arrsync.domain.documents import (
    documents_equal,
    merge_documents,
    normalize_specification_fields,
)
from arrsync.domain.errors import DocumentShapeError

from .contracts import (
    DeletedTransaction,
    NewTransaction,
    RecordFailure,
    TransactionSet,
    UnchangedTransaction,
    UpdatedTransaction,
)
from .match import find_remote_by_id, match_remote_record

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from arrsync.domain.ports.persistence import IdentityLookup
    from arrsync.domain.records import DesiredRecord, RemoteRecord

    from .contracts import RecordTransaction

log = getLogger(__name__)


def classify_records(
    records: Iterable[DesiredRecord],
    remote_records: Sequence[RemoteRecord],
    cache: IdentityLookup,
) -> TransactionSet:
    """Classify every desired record; a malformed record never stops its siblings."""

    transactions = TransactionSet()
    for record in records:
        try:
            transactions.add(classify_record(record, remote_records, cache))
        except DocumentShapeError as exc:
            log.warning("Skipping %s (%s): %s", record.name, record.key, exc)
            transactions.failures.append(RecordFailure(record=record, reason=str(exc)))
    return transactions


def classify_record(
    record: DesiredRecord,
    remote_records: Sequence[RemoteRecord],
    cache: IdentityLookup,
) -> RecordTransaction:
    desired = normalize_specification_fields(record.document)
    remote = match_remote_record(record, remote_records, cache)
    if remote is None:
        log.debug("No remote match for %s (%s)", record.name, record.key)
        return NewTransaction(record=record, payload=desired)

    resolved = replace(record, remote_id=remote.id)
    merged = merge_documents(remote.document, desired)
    if documents_equal(merged, remote.document):
        return UnchangedTransaction(record=resolved, remote_id=remote.id)
    return UpdatedTransaction(record=resolved, remote_id=remote.id, payload=merged)


def record_deletions(
    transactions: TransactionSet,
    cached_entries: Mapping[str, int],
    remote_records: Sequence[RemoteRecord],
) -> None:
    """Add deletions for cached records that are no longer desired.

    Only an id match qualifies a record for deletion. Cached ids that no longer
    exist remotely were removed by the user, and ids matched by a desired record
    in this pass now belong to that record; both are queued as stale keys.
    """

    desired_keys = transactions.desired_keys
    claimed_ids = set(transactions.resolved_ids().values())
    for key, remote_id in cached_entries.items():
        if key in desired_keys:
            continue
        if remote_id in claimed_ids:
            log.debug("Cached id %s for %s was adopted by another record", remote_id, key)
            transactions.stale_keys.append(key)
            continue
        remote = find_remote_by_id(remote_records, remote_id)
        if remote is None:
            log.debug("Cached id %s for %s no longer exists remotely", remote_id, key)
            transactions.stale_keys.append(key)
            continue
        transactions.deleted.append(
            DeletedTransaction(remote_id=remote.id, key=key, name=remote.name)
        )
