"""Port for talking to a service instance."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from arrsync.domain.documents import DocumentMapping
    from arrsync.domain.records import RecordKind, RemoteRecord


@runtime_checkable
class RemoteRecordClient(Protocol):
    """Async CRUD access to the records of one service instance.

    Every call may raise ``RemoteCallError``.
    """

    async def get_records(self, kind: RecordKind) -> list[RemoteRecord]: ...

    async def create_record(self, kind: RecordKind, payload: DocumentMapping) -> RemoteRecord: ...

    async def update_record(
        self,
        kind: RecordKind,
        remote_id: int,
        payload: DocumentMapping,
    ) -> None: ...

    async def delete_record(self, kind: RecordKind, remote_id: int) -> None: ...


__all__ = ["RemoteRecordClient"]
