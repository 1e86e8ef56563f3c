from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from arrsync.adapters.guide import FilesystemGuide, GuideNotFoundError
from arrsync.domain.records import ServiceType

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def guide_root(tmp_path: Path) -> Path:
    cf_dir = tmp_path / "docs" / "json" / "radarr" / "cf"
    _write(
        cf_dir / "x265.json",
        {
            "trash_id": "a1",
            "trash_scores": {"default": -10000},
            "trash_regex": "https://regex101.com/r/x",
            "name": "x265",
            "includeCustomFormatWhenRenaming": False,
            "specifications": [
                {
                    "name": "x265",
                    "implementation": "ReleaseTitleSpecification",
                    "negate": False,
                    "required": False,
                    "fields": {"value": "x265"},
                }
            ],
        },
    )
    _write(cf_dir / "hdr.json", {"trash_id": "b2", "name": "HDR", "specifications": []})
    _write(cf_dir / "broken.json", {"name": "no trash id"})
    (cf_dir / "garbage.json").write_text("{not json", encoding="utf-8")
    _write(cf_dir / "zz_copy.json", {"trash_id": "b2", "name": "HDR copy"})

    rp_dir = tmp_path / "docs" / "json" / "sonarr" / "rp"
    _write(
        rp_dir / "optionals.json",
        {
            "trash_id": "rp1",
            "name": "Optionals",
            "includePreferredWhenRenaming": True,
            "required": [{"term": "x264"}],
            "ignored": [{"term": "TBA"}],
            "preferred": [{"score": 100, "terms": [{"term": "HDR"}, {"term": "DV"}]}],
        },
    )
    return tmp_path


def test_custom_formats_strip_guide_only_fields(guide_root: Path) -> None:
    guide = FilesystemGuide(guide_root)
    formats = {item.trash_id: item for item in guide.custom_formats(ServiceType.RADARR)}

    x265 = formats["a1"]
    assert x265.name == "x265"
    assert x265.default_score == -10000
    assert not any(key.startswith("trash_") for key in x265.document)
    assert x265.document["specifications"][0]["fields"] == {"value": "x265"}  # type: ignore[index]
    assert formats["b2"].default_score is None


def test_invalid_and_duplicate_files_are_skipped(
    guide_root: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        formats = FilesystemGuide(guide_root).custom_formats(ServiceType.RADARR)

    assert sorted(item.trash_id for item in formats) == ["a1", "b2"]
    assert "broken.json" in caplog.text
    assert "garbage.json" in caplog.text
    assert "Duplicate trash id b2" in caplog.text


def test_release_profiles_are_translated(guide_root: Path) -> None:
    [profile] = FilesystemGuide(guide_root).release_profiles()

    assert profile.trash_id == "rp1"
    assert profile.include_preferred_when_renaming is True
    assert profile.required == ("x264",)
    assert profile.ignored == ("TBA",)
    assert [(group.score, group.terms) for group in profile.preferred] == [(100, ("HDR", "DV"))]


def test_missing_guide_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(GuideNotFoundError):
        FilesystemGuide(tmp_path).custom_formats(ServiceType.SONARR)
