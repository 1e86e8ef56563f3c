"""Instance-scoped view over the identity cache store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports.persistence import IdentityCacheStore
    from .records import RecordKind

log = getLogger(__name__)


@dataclass(slots=True)
class ScopedIdentityCache:
    """Identity cache bound to one service instance and record kind."""

    store: IdentityCacheStore
    instance: str
    kind: RecordKind

    def lookup(self, key: str) -> int | None:
        return self.store.lookup(self.instance, self.kind, key)

    def remember(self, key: str, remote_id: int) -> None:
        if self.lookup(key) == remote_id:
            return
        log.debug("Caching %s %s -> %s for %s", self.kind, key, remote_id, self.instance)
        self.store.store(self.instance, self.kind, key, remote_id)

    def forget(self, key: str) -> None:
        log.debug("Dropping cached %s %s for %s", self.kind, key, self.instance)
        self.store.remove(self.instance, self.kind, key)

    def entries(self) -> dict[str, int]:
        return self.store.entries(self.instance, self.kind)
