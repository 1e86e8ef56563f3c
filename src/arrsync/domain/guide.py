"""Guide data as consumed by the reconciliation core."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .records import DesiredRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .documents import DocumentMapping


@dataclass(slots=True, frozen=True, kw_only=True)
class GuideCustomFormat:
    """A custom format definition published by the guide."""

    trash_id: str
    name: str
    document: DocumentMapping
    default_score: int | None = None
    remote_id: int | None = None

    def to_desired_record(self) -> DesiredRecord:
        return DesiredRecord(key=self.trash_id, name=self.name, document=self.document)

    def with_remote_id(self, remote_id: int | None) -> GuideCustomFormat:
        return replace(self, remote_id=remote_id)


@dataclass(slots=True, frozen=True)
class PreferredTerms:
    score: int
    terms: tuple[str, ...]


@dataclass(slots=True, frozen=True, kw_only=True)
class GuideReleaseProfile:
    """A Sonarr release profile definition published by the guide."""

    trash_id: str
    name: str
    include_preferred_when_renaming: bool = False
    required: tuple[str, ...] = ()
    ignored: tuple[str, ...] = ()
    preferred: tuple[PreferredTerms, ...] = ()


def build_guide_index(
    formats: Iterable[GuideCustomFormat],
    remote_ids: Mapping[str, int] | None = None,
) -> dict[str, GuideCustomFormat]:
    """Index guide formats by case-folded trash id, attaching known remote ids."""

    index: dict[str, GuideCustomFormat] = {}
    for guide_format in formats:
        if remote_ids is not None and guide_format.trash_id in remote_ids:
            guide_format = guide_format.with_remote_id(remote_ids[guide_format.trash_id])
        index.setdefault(guide_format.trash_id.casefold(), guide_format)
    return index


def lookup_guide_format(
    index: Mapping[str, GuideCustomFormat],
    trash_id: str,
) -> GuideCustomFormat | None:
    return index.get(trash_id.casefold())
