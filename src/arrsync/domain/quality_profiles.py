"""Apply aggregated custom format scores to the service's quality profiles."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from .reconciliation.match import find_remote_by_name
from .records import RecordKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .documents import DocumentMapping
    from .ports.remote import RemoteRecordClient
    from .records import RemoteRecord
    from .scoring.aggregate import QualityProfileAggregate

log = getLogger(__name__)

FORMAT_ITEMS_FIELD = "formatItems"


@dataclass(slots=True, frozen=True, kw_only=True)
class QualityProfileUpdate:
    profile_id: int
    name: str
    payload: DocumentMapping
    changed_scores: int


def plan_quality_profile_updates(
    aggregates: Iterable[QualityProfileAggregate],
    remote_profiles: Sequence[RemoteRecord],
) -> list[QualityProfileUpdate]:
    """Compute the quality profile payloads whose scores need to change."""

    updates: list[QualityProfileUpdate] = []
    for aggregate in aggregates:
        remote = find_remote_by_name(remote_profiles, aggregate.name)
        if remote is None:
            log.warning(
                "Quality profile %s does not exist on the service; its scores are skipped",
                aggregate.name,
            )
            continue

        update = _plan_update(aggregate, remote)
        if update is None:
            log.info("Quality profile %s scores are already up to date", remote.name)
            continue
        updates.append(update)
    return updates


def _plan_update(
    aggregate: QualityProfileAggregate,
    remote: RemoteRecord,
) -> QualityProfileUpdate | None:
    payload = copy.deepcopy(remote.document)
    format_items = payload.get(FORMAT_ITEMS_FIELD)
    if not isinstance(format_items, list):
        log.warning("Quality profile %s has no %s; skipping", remote.name, FORMAT_ITEMS_FIELD)
        return None

    reset_unmatched = bool(aggregate.profile.reset_unmatched_scores)
    seen_formats: set[int] = set()
    changed = 0
    for item in format_items:
        if not isinstance(item, dict):
            continue
        entry = cast("DocumentMapping", item)
        format_id = entry.get("format")
        if not isinstance(format_id, int):
            continue
        seen_formats.add(format_id)
        if format_id in aggregate.scores:
            score = aggregate.scores[format_id]
        elif reset_unmatched:
            score = 0
        else:
            continue
        if entry.get("score") != score:
            entry["score"] = score
            changed += 1

    missing = [format_id for format_id in aggregate.scores if format_id not in seen_formats]
    if missing:
        log.warning(
            "Quality profile %s does not list custom format ids %s; their scores are skipped",
            remote.name,
            ", ".join(str(format_id) for format_id in missing),
        )

    if not changed:
        return None
    return QualityProfileUpdate(
        profile_id=remote.id,
        name=remote.name,
        payload=payload,
        changed_scores=changed,
    )


async def apply_quality_profile_updates(
    client: RemoteRecordClient,
    updates: Iterable[QualityProfileUpdate],
) -> int:
    applied = 0
    for update in updates:
        await client.update_record(RecordKind.QUALITY_PROFILE, update.profile_id, update.payload)
        log.info(
            "Updated %s scores in quality profile %s",
            update.changed_scores,
            update.name,
        )
        applied += 1
    return applied
