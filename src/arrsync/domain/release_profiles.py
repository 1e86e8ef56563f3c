"""Build desired release profile records from guide data and configuration."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .reconciliation.match import find_remote_by_name
from .records import DesiredRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from arrsync.config.models import ReleaseProfileConfig

    from .documents import Document, DocumentMapping
    from .guide import GuideReleaseProfile
    from .records import RemoteRecord

log = getLogger(__name__)

RELEASE_PROFILE_TITLE_PREFIX = "[Trash]"


def release_profile_title(name: str) -> str:
    return f"{RELEASE_PROFILE_TITLE_PREFIX} {name}"


def build_release_profile_records(
    configs: Iterable[ReleaseProfileConfig],
    guide_profiles: Iterable[GuideReleaseProfile],
    tags: Sequence[RemoteRecord],
) -> list[DesiredRecord]:
    """Return one desired record per configured trash id found in the guide."""

    by_trash_id = {profile.trash_id.casefold(): profile for profile in guide_profiles}
    records: list[DesiredRecord] = []
    seen: set[str] = set()
    for config in configs:
        tag_ids = resolve_tag_ids(config.tags, tags)
        for trash_id in config.trash_ids:
            profile = by_trash_id.get(trash_id.casefold())
            if profile is None:
                log.warning("A release profile with Trash ID %s does not exist", trash_id)
                continue
            if profile.trash_id in seen:
                log.warning(
                    "Release profile %s (%s) is configured more than once; using the first entry",
                    profile.name,
                    profile.trash_id,
                )
                continue
            seen.add(profile.trash_id)
            log.debug("Found Release Profile: %s (%s)", profile.name, profile.trash_id)
            title = release_profile_title(profile.name)
            records.append(
                DesiredRecord(
                    key=profile.trash_id,
                    name=title,
                    document=release_profile_document(title, profile, tag_ids),
                )
            )
    return records


def release_profile_document(
    title: str,
    profile: GuideReleaseProfile,
    tag_ids: Sequence[int],
) -> DocumentMapping:
    preferred: list[Document] = [
        {"key": term, "value": group.score} for group in profile.preferred for term in group.terms
    ]
    return {
        "name": title,
        "enabled": True,
        "required": list(profile.required),
        "ignored": list(profile.ignored),
        "preferred": preferred,
        "includePreferredWhenRenaming": profile.include_preferred_when_renaming,
        "tags": list(tag_ids),
    }


def resolve_tag_ids(labels: Iterable[str], tags: Sequence[RemoteRecord]) -> list[int]:
    """Map tag labels to existing remote tag ids; unknown labels are skipped."""

    tag_ids: list[int] = []
    for label in labels:
        tag = find_remote_by_name(tags, label)
        if tag is None:
            log.warning("Tag %s does not exist on the service; create it there first", label)
            continue
        if tag.id not in tag_ids:
            tag_ids.append(tag.id)
    return tag_ids
