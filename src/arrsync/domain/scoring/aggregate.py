"""Compute the final custom format scores for each quality profile.

Missing guide entries and missing scores are normal omissions: they are logged
and skipped, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from arrsync.config.models import QualityProfileConfig
from arrsync.domain.guide import lookup_guide_format

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from arrsync.config.models import QualityProfileScoreConfig, ServiceConfiguration
    from arrsync.domain.guide import GuideCustomFormat

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ProfileAssociation:
    """One configured ``(quality profile, custom format)`` pairing."""

    profile: QualityProfileScoreConfig
    trash_id: str


@dataclass(slots=True)
class QualityProfileAggregate:
    """Scores keyed by remote custom format id, in first-seen order."""

    profile: QualityProfileConfig
    scores: dict[int, int] = field(default_factory=dict[int, int])

    @property
    def name(self) -> str:
        return self.profile.name


def profile_associations(config: ServiceConfiguration) -> list[ProfileAssociation]:
    """Flatten ``custom_formats[*].quality_profiles`` x ``trash_ids`` in declaration order."""

    return [
        ProfileAssociation(profile=profile, trash_id=trash_id)
        for custom_format in config.custom_formats
        for profile in custom_format.quality_profiles
        for trash_id in custom_format.trash_ids
    ]


def aggregate_scores(
    associations: Iterable[ProfileAssociation],
    guide_index: Mapping[str, GuideCustomFormat],
    *,
    quality_profiles: Sequence[QualityProfileConfig] = (),
) -> dict[str, QualityProfileAggregate]:
    """Return aggregates keyed by case-folded profile name.

    Profiles that end up without any score are left out.
    """

    aggregates: dict[str, QualityProfileAggregate] = {}
    for association in associations:
        guide_format = lookup_guide_format(guide_index, association.trash_id)
        if guide_format is None:
            log.info(
                "Custom format %s referenced by quality profile %s is not in the guide",
                association.trash_id,
                association.profile.name,
            )
            continue
        if guide_format.remote_id is None:
            log.info(
                "Custom format %s (%s) has no id on the service yet; not scoring it in %s",
                guide_format.name,
                guide_format.trash_id,
                association.profile.name,
            )
            continue

        score = association.profile.score
        if score is None:
            score = guide_format.default_score
        if score is None:
            log.info(
                "No score in guide or config for custom format %s (%s)",
                guide_format.name,
                guide_format.trash_id,
            )
            continue

        folded = association.profile.name.casefold()
        aggregate = aggregates.get(folded)
        if aggregate is None:
            aggregate = QualityProfileAggregate(
                profile=_root_profile(association.profile.name, quality_profiles)
            )
            aggregates[folded] = aggregate
        _add_score(aggregate, guide_format, score)

    return {name: aggregate for name, aggregate in aggregates.items() if aggregate.scores}


def _root_profile(
    name: str,
    quality_profiles: Sequence[QualityProfileConfig],
) -> QualityProfileConfig:
    wanted = name.casefold()
    for profile in quality_profiles:
        if profile.name.casefold() == wanted:
            return profile
    return QualityProfileConfig(name=name)


def _add_score(
    aggregate: QualityProfileAggregate,
    guide_format: GuideCustomFormat,
    score: int,
) -> None:
    remote_id = guide_format.remote_id
    if remote_id is None:
        return
    existing = aggregate.scores.get(remote_id)
    if existing is None:
        aggregate.scores[remote_id] = score
        return
    if existing != score:
        log.warning(
            "Custom format %s (%s) is duplicated in quality profile %s with a score of %s, "
            "which is different from the original score of %s",
            guide_format.name,
            guide_format.trash_id,
            aggregate.name,
            score,
            existing,
        )
    else:
        log.debug("Skipping duplicate score for %s (%s)", guide_format.name, guide_format.trash_id)
