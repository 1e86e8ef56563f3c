"""Read guide data from a local checkout of the guide repository."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from arrsync.config.errors import ConfigurationError
from arrsync.domain.ports.guide import GuideProvider
from arrsync.domain.records import ServiceType

from .schema import CustomFormatPayload, ReleaseProfilePayload
from .translator import translate_custom_format, translate_release_profile

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from arrsync.domain.documents import DocumentMapping
    from arrsync.domain.guide import GuideCustomFormat, GuideReleaseProfile

log = getLogger(__name__)

JSON_ROOT = ("docs", "json")
CUSTOM_FORMAT_DIR = "cf"
RELEASE_PROFILE_DIR = "rp"


class GuideNotFoundError(ConfigurationError):
    """Raised when the guide directory does not contain the expected data."""


@dataclass(slots=True)
class FilesystemGuide(GuideProvider):
    """Guide provider reading ``<root>/docs/json/<service>/{cf,rp}/*.json``.

    Files that fail to parse are logged and skipped; keeping the checkout up to
    date is left to the user.
    """

    root: Path

    def custom_formats(self, service: ServiceType) -> list[GuideCustomFormat]:
        formats: list[GuideCustomFormat] = []
        seen: set[str] = set()
        for path, raw in self._iter_json(service, CUSTOM_FORMAT_DIR):
            try:
                payload = CustomFormatPayload.model_validate(raw)
            except ValidationError as exc:
                log.warning("Skipping invalid custom format file %s: %s", path, exc)
                continue
            if payload.trash_id in seen:
                log.warning(
                    "Duplicate trash id %s in %s; keeping the first", payload.trash_id, path
                )
                continue
            seen.add(payload.trash_id)
            formats.append(translate_custom_format(payload, cast("DocumentMapping", raw)))
        log.debug("Loaded %s %s custom formats from the guide", len(formats), service)
        return formats

    def release_profiles(self) -> list[GuideReleaseProfile]:
        profiles: list[GuideReleaseProfile] = []
        for path, raw in self._iter_json(ServiceType.SONARR, RELEASE_PROFILE_DIR):
            try:
                payload = ReleaseProfilePayload.model_validate(raw)
            except ValidationError as exc:
                log.warning("Skipping invalid release profile file %s: %s", path, exc)
                continue
            profiles.append(translate_release_profile(payload))
        log.debug("Loaded %s release profiles from the guide", len(profiles))
        return profiles

    def _iter_json(self, service: ServiceType, subdir: str) -> Iterator[tuple[Path, object]]:
        directory = self.root.joinpath(*JSON_ROOT, service.value, subdir)
        if not directory.is_dir():
            raise GuideNotFoundError(f"Guide data not found at {directory}")
        for path in sorted(directory.glob("*.json")):
            try:
                with path.open(encoding="utf-8") as handle:
                    raw = json.load(handle)
            except (OSError, json.JSONDecodeError) as exc:
                log.warning("Skipping unreadable guide file %s: %s", path, exc)
                continue
            yield path, raw
