"""Errors raised by the reconciliation core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .records import RecordKind


class DocumentShapeError(ValueError):
    """Raised when a document cannot be normalised or merged because of its shape."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RemoteCallError(RuntimeError):
    """Raised when a call against a service instance fails."""

    def __init__(
        self,
        message: str,
        *,
        kind: RecordKind,
        identifier: int | str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.identifier = identifier
