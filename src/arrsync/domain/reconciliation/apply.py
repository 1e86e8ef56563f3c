"""Apply a classified transaction set against a service instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import NewTransaction, UpdatedTransaction

if TYPE_CHECKING:
    from arrsync.domain.identity_cache import ScopedIdentityCache
    from arrsync.domain.ports.remote import RemoteRecordClient
    from arrsync.domain.records import RecordKind

    from .contracts import TransactionSet

log = getLogger(__name__)


@dataclass(slots=True)
class ApplyResult:
    """Counts of applied transactions plus the remote id of every desired record."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    deleted: int = 0
    failed: int = 0
    remote_ids: dict[str, int] = field(default_factory=dict[str, int])

    @classmethod
    def preview(cls, transactions: TransactionSet) -> ApplyResult:
        """Summarise ``transactions`` without touching the service."""

        return cls(
            created=len(transactions.new),
            updated=len(transactions.updated),
            unchanged=len(transactions.unchanged),
            deleted=len(transactions.deleted),
            failed=len(transactions.failures),
            remote_ids=transactions.resolved_ids(),
        )


async def apply_transactions(
    client: RemoteRecordClient,
    kind: RecordKind,
    transactions: TransactionSet,
    cache: ScopedIdentityCache,
) -> ApplyResult:
    """Create and update in declaration order, then delete.

    Calls are issued one at a time. The cache is only written once the service
    confirmed the identifier, so an aborted run leaves it consistent.
    """

    result = ApplyResult(failed=len(transactions.failures))

    for transaction in transactions.changes:
        record = transaction.record
        if isinstance(transaction, NewTransaction):
            created = await client.create_record(kind, transaction.payload)
            log.info("Created %s: %s (id %s)", kind, record.name, created.id)
            cache.remember(record.key, created.id)
            result.remote_ids[record.key] = created.id
            result.created += 1
            continue

        if isinstance(transaction, UpdatedTransaction):
            await client.update_record(kind, transaction.remote_id, transaction.payload)
            log.info("Updated %s: %s (id %s)", kind, record.name, transaction.remote_id)
            result.updated += 1
        else:
            log.debug("Unchanged %s: %s (id %s)", kind, record.name, transaction.remote_id)
            result.unchanged += 1
        cache.remember(record.key, transaction.remote_id)
        result.remote_ids[record.key] = transaction.remote_id

    for deletion in transactions.deleted:
        await client.delete_record(kind, deletion.remote_id)
        log.info("Deleted %s: %s (id %s)", kind, deletion.name, deletion.remote_id)
        cache.forget(deletion.key)
        result.deleted += 1

    for key in transactions.stale_keys:
        cache.forget(key)

    return result
