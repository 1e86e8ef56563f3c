"""Ports connecting the reconciliation core to its collaborators."""

from __future__ import annotations

from .guide import GuideProvider
from .persistence import IdentityCacheStore, IdentityLookup
from .remote import RemoteRecordClient

__all__ = [
    "GuideProvider",
    "IdentityCacheStore",
    "IdentityLookup",
    "RemoteRecordClient",
]
