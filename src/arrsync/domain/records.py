"""Record types shared by the reconciliation core and its adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .documents import DocumentMapping


class ServiceType(StrEnum):
    """Kinds of services arrsync can manage."""

    RADARR = "radarr"
    SONARR = "sonarr"


class RecordKind(StrEnum):
    """Remote entity types the engine reconciles."""

    CUSTOM_FORMAT = "custom_format"
    QUALITY_PROFILE = "quality_profile"
    RELEASE_PROFILE = "release_profile"
    TAG = "tag"


@dataclass(slots=True, frozen=True, kw_only=True)
class DesiredRecord:
    """One guide-sourced entity we want to exist remotely.

    ``key`` is the guide's content key and is unique within a guide snapshot;
    ``name`` is not. ``remote_id`` is only set on copies produced by matching.
    """

    key: str
    name: str
    document: DocumentMapping
    remote_id: int | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class RemoteRecord:
    """One entity as currently held by a service instance."""

    id: int
    name: str
    document: DocumentMapping
