"""Transaction types produced by classification and consumed by the applier.

A ``TransactionSet`` is produced once per reconciliation pass and consumed
exactly once; nothing in it is retried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from arrsync.domain.documents import DocumentMapping
    from arrsync.domain.records import DesiredRecord


class TransactionKind(StrEnum):
    """Outcome of classifying one record."""

    NEW = "new"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


@dataclass(slots=True, frozen=True, kw_only=True)
class NewTransaction:
    """Record has no remote counterpart and must be created."""

    record: DesiredRecord
    payload: DocumentMapping
    kind: Literal[TransactionKind.NEW] = TransactionKind.NEW


@dataclass(slots=True, frozen=True, kw_only=True)
class UpdatedTransaction:
    """Record matched a remote record whose payload differs after merging."""

    record: DesiredRecord
    remote_id: int
    payload: DocumentMapping
    kind: Literal[TransactionKind.UPDATED] = TransactionKind.UPDATED


@dataclass(slots=True, frozen=True, kw_only=True)
class UnchangedTransaction:
    """Record matched a remote record that already holds the desired payload."""

    record: DesiredRecord
    remote_id: int
    kind: Literal[TransactionKind.UNCHANGED] = TransactionKind.UNCHANGED


@dataclass(slots=True, frozen=True, kw_only=True)
class DeletedTransaction:
    """Previously managed remote record that is no longer desired."""

    remote_id: int
    key: str
    name: str
    kind: Literal[TransactionKind.DELETED] = TransactionKind.DELETED


@dataclass(slots=True, frozen=True, kw_only=True)
class RecordFailure:
    """Record skipped because its document could not be normalised or merged."""

    record: DesiredRecord
    reason: str


type RecordTransaction = NewTransaction | UpdatedTransaction | UnchangedTransaction
type Transaction = RecordTransaction | DeletedTransaction


@dataclass(slots=True)
class TransactionSet:
    """Classified transactions for one record kind on one instance.

    ``changes`` keeps declaration order of the desired records. ``stale_keys``
    lists cache entries whose remote record vanished without our involvement.
    """

    changes: list[RecordTransaction] = field(default_factory=list["RecordTransaction"])
    deleted: list[DeletedTransaction] = field(default_factory=list["DeletedTransaction"])
    failures: list[RecordFailure] = field(default_factory=list["RecordFailure"])
    stale_keys: list[str] = field(default_factory=list[str])

    def add(self, transaction: RecordTransaction) -> None:
        self.changes.append(transaction)

    @property
    def new(self) -> list[NewTransaction]:
        return [tx for tx in self.changes if isinstance(tx, NewTransaction)]

    @property
    def updated(self) -> list[UpdatedTransaction]:
        return [tx for tx in self.changes if isinstance(tx, UpdatedTransaction)]

    @property
    def unchanged(self) -> list[UnchangedTransaction]:
        return [tx for tx in self.changes if isinstance(tx, UnchangedTransaction)]

    @property
    def desired_keys(self) -> set[str]:
        keys = {tx.record.key for tx in self.changes}
        keys.update(failure.record.key for failure in self.failures)
        return keys

    def resolved_ids(self) -> dict[str, int]:
        """Remote ids of records that matched an existing remote record."""

        return {
            tx.record.key: tx.remote_id
            for tx in self.changes
            if not isinstance(tx, NewTransaction)
        }
