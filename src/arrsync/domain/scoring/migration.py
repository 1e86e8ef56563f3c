"""Promote deprecated per-reference configuration to its root-level home."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from arrsync.config.models import QualityProfileConfig

if TYPE_CHECKING:
    from arrsync.config.models import ServiceConfiguration

log = getLogger(__name__)


def migrate_legacy_overrides(config: ServiceConfiguration) -> ServiceConfiguration:
    """Move the legacy per-reference ``reset_unmatched_scores`` to root ``quality_profiles``.

    Explicit root-level values are never overwritten.
    """

    legacy = [
        profile
        for custom_format in config.custom_formats
        for profile in custom_format.quality_profiles
        if profile.reset_unmatched_scores is not None
    ]
    if not legacy:
        return config

    log.warning(
        "DEPRECATION: Support for using `reset_unmatched_scores` under "
        "`custom_formats.quality_profiles` will be removed in a future release. "
        "Move it to the top level `quality_profiles` instead"
    )

    promoted: dict[str, str] = {}
    for profile in legacy:
        if profile.reset_unmatched_scores:
            promoted.setdefault(profile.name.casefold(), profile.name)

    builder = config.quality_profiles_builder()
    for name in promoted.values():
        index = builder.find(name)
        if index is None:
            log.debug(
                "Root-level quality profile created to promote reset_unmatched_scores "
                "from CF score config: %s",
                name,
            )
            builder.add(QualityProfileConfig(name=name, reset_unmatched_scores=True))
        elif builder.profiles[index].reset_unmatched_scores is None:
            log.debug(
                "Score-based reset_unmatched_scores propagated to existing root-level "
                "quality profile config: %s",
                name,
            )
            builder.update(index, reset_unmatched_scores=True)

    return builder.seal()
