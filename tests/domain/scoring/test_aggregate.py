from __future__ import annotations

import logging

import pytest

from arrsync.config.models import QualityProfileConfig, ServiceConfiguration
from arrsync.domain.guide import build_guide_index
from arrsync.domain.scoring import aggregate_scores, profile_associations
from tests.helpers.servarr import make_config, make_guide_format


def _config(*custom_formats: dict[str, object], **values: object) -> ServiceConfiguration:
    return make_config(custom_formats=list(custom_formats), **values)


def test_explicit_score_beats_guide_default() -> None:
    config = _config({"trash_ids": ["a1"], "quality_profiles": [{"name": "HD", "score": 50}]})
    index = build_guide_index([make_guide_format("a1", "x265", default_score=10, remote_id=9)])

    aggregates = aggregate_scores(profile_associations(config), index)

    assert aggregates["hd"].scores == {9: 50}


def test_guide_default_used_when_no_score_configured() -> None:
    config = _config({"trash_ids": ["a1"], "quality_profiles": [{"name": "HD"}]})
    index = build_guide_index([make_guide_format("a1", "x265", default_score=10, remote_id=9)])

    aggregates = aggregate_scores(profile_associations(config), index)

    assert aggregates["hd"].scores == {9: 10}


def test_first_score_wins_and_conflict_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    config = _config(
        {"trash_ids": ["a1"], "quality_profiles": [{"name": "HD", "score": 100}]},
        {"trash_ids": ["A1"], "quality_profiles": [{"name": "hd", "score": 200}]},
    )
    index = build_guide_index([make_guide_format("a1", "x265", remote_id=9)])

    with caplog.at_level(logging.WARNING):
        aggregates = aggregate_scores(profile_associations(config), index)

    assert list(aggregates) == ["hd"]
    assert aggregates["hd"].scores == {9: 100}
    assert "is duplicated in quality profile HD with a score of 200" in caplog.text


def test_identical_duplicate_is_not_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    config = _config(
        {"trash_ids": ["a1"], "quality_profiles": [{"name": "HD", "score": 100}]},
        {"trash_ids": ["a1"], "quality_profiles": [{"name": "HD", "score": 100}]},
    )
    index = build_guide_index([make_guide_format("a1", "x265", remote_id=9)])

    with caplog.at_level(logging.WARNING):
        aggregates = aggregate_scores(profile_associations(config), index)

    assert aggregates["hd"].scores == {9: 100}
    assert caplog.records == []


def test_omissions_are_skipped_and_empty_profiles_dropped() -> None:
    config = _config(
        {
            "trash_ids": ["missing", "no-id", "no-score"],
            "quality_profiles": [{"name": "Empty"}],
        },
        {"trash_ids": ["a1"], "quality_profiles": [{"name": "HD"}]},
    )
    index = build_guide_index(
        [
            make_guide_format("no-id", "Not synced", default_score=5),
            make_guide_format("no-score", "Unscored", remote_id=3),
            make_guide_format("a1", "x265", default_score=10, remote_id=9),
        ]
    )

    aggregates = aggregate_scores(profile_associations(config), index)

    assert list(aggregates) == ["hd"]


def test_scores_keep_insertion_order() -> None:
    config = _config(
        {"trash_ids": ["b", "a"], "quality_profiles": [{"name": "HD", "score": 1}]},
    )
    index = build_guide_index(
        [make_guide_format("a", "A", remote_id=1), make_guide_format("b", "B", remote_id=2)]
    )

    aggregates = aggregate_scores(profile_associations(config), index)

    assert list(aggregates["hd"].scores) == [2, 1]


def test_root_level_profile_config_is_attached() -> None:
    config = _config({"trash_ids": ["a1"], "quality_profiles": [{"name": "hd", "score": 1}]})
    index = build_guide_index([make_guide_format("a1", "x265", remote_id=9)])
    root = QualityProfileConfig(name="HD", reset_unmatched_scores=True)

    aggregates = aggregate_scores(profile_associations(config), index, quality_profiles=[root])

    assert aggregates["hd"].profile is root
