"""Reconciliation core: match desired records to remote ones and converge them.

Flow for one record kind on one instance:
1) match each desired record (cached id first, then name)
2) merge the desired document onto the matched remote document
3) classify into New/Updated/Unchanged, plus Deleted for dropped cache entries
4) apply the transactions and keep the identity cache in step
"""

from __future__ import annotations

from .apply import ApplyResult, apply_transactions
from .classify import classify_record, classify_records, record_deletions
from .contracts import (
    DeletedTransaction,
    NewTransaction,
    RecordFailure,
    Transaction,
    TransactionKind,
    TransactionSet,
    UnchangedTransaction,
    UpdatedTransaction,
)
from .match import find_remote_by_id, find_remote_by_name, match_remote_record

__all__ = [
    "ApplyResult",
    "DeletedTransaction",
    "NewTransaction",
    "RecordFailure",
    "Transaction",
    "TransactionKind",
    "TransactionSet",
    "UnchangedTransaction",
    "UpdatedTransaction",
    "apply_transactions",
    "classify_record",
    "classify_records",
    "find_remote_by_id",
    "find_remote_by_name",
    "match_remote_record",
    "record_deletions",
]
