"""Ports for the durable identity cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from arrsync.domain.records import RecordKind


@runtime_checkable
class IdentityCacheStore(Protocol):
    """Durable mapping of ``(instance, kind, content key)`` to a remote id."""

    def lookup(self, instance: str, kind: RecordKind, key: str) -> int | None: ...

    def store(self, instance: str, kind: RecordKind, key: str, remote_id: int) -> None: ...

    def remove(self, instance: str, kind: RecordKind, key: str) -> None: ...

    def entries(self, instance: str, kind: RecordKind) -> dict[str, int]: ...


@runtime_checkable
class IdentityLookup(Protocol):
    """Read side of an identity cache already scoped to one instance and kind."""

    def lookup(self, key: str) -> int | None: ...


__all__ = ["IdentityCacheStore", "IdentityLookup"]
