"""Quality profile score aggregation and legacy configuration migration."""

from __future__ import annotations

from .aggregate import (
    ProfileAssociation,
    QualityProfileAggregate,
    aggregate_scores,
    profile_associations,
)
from .migration import migrate_legacy_overrides

__all__ = [
    "ProfileAssociation",
    "QualityProfileAggregate",
    "aggregate_scores",
    "migrate_legacy_overrides",
    "profile_associations",
]
