"""Port for reading guide data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from arrsync.domain.guide import GuideCustomFormat, GuideReleaseProfile
    from arrsync.domain.records import ServiceType


@runtime_checkable
class GuideProvider(Protocol):
    """Source of resolved, validated guide definitions."""

    def custom_formats(self, service: ServiceType) -> list[GuideCustomFormat]: ...

    def release_profiles(self) -> list[GuideReleaseProfile]: ...


__all__ = ["GuideProvider"]
