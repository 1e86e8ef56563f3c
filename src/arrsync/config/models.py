"""Pydantic models describing one configured service instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from arrsync.domain.records import ServiceType


class ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class QualityProfileScoreConfig(ConfigModel):
    """Score assignment for a set of custom formats within one quality profile.

    ``reset_unmatched_scores`` is the deprecated location of the root-level
    quality profile flag; ``migrate_legacy_overrides`` moves it.
    """

    name: str = Field(min_length=1)
    score: int | None = None
    reset_unmatched_scores: bool | None = None


class CustomFormatConfig(ConfigModel):
    trash_ids: tuple[str, ...] = ()
    quality_profiles: tuple[QualityProfileScoreConfig, ...] = ()


class QualityProfileConfig(ConfigModel):
    name: str = Field(min_length=1)
    reset_unmatched_scores: bool | None = None


class ReleaseProfileConfig(ConfigModel):
    trash_ids: tuple[str, ...]
    tags: tuple[str, ...] = ()

    @field_validator("trash_ids")
    @classmethod
    def _require_trash_ids(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("'trash_ids' is required for 'release_profiles' elements")
        return value


class ServiceConfiguration(ConfigModel):
    """Validated configuration for one service instance."""

    service_type: ServiceType
    instance_name: str = Field(min_length=1)
    base_url: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    delete_old_custom_formats: bool = False
    custom_formats: tuple[CustomFormatConfig, ...] = ()
    quality_profiles: tuple[QualityProfileConfig, ...] = ()
    release_profiles: tuple[ReleaseProfileConfig, ...] = ()

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("'base_url' must start with http:// or https://")
        return stripped

    @model_validator(mode="after")
    def _release_profiles_need_sonarr(self) -> Self:
        if self.release_profiles and self.service_type is not ServiceType.SONARR:
            raise ValueError("'release_profiles' is only supported for sonarr instances")
        return self

    def custom_format_trash_ids(self) -> list[str]:
        """All configured custom format trash ids in declaration order, without duplicates."""

        seen: set[str] = set()
        ordered: list[str] = []
        for custom_format in self.custom_formats:
            for trash_id in custom_format.trash_ids:
                folded = trash_id.casefold()
                if folded in seen:
                    continue
                seen.add(folded)
                ordered.append(trash_id)
        return ordered

    def quality_profiles_builder(self) -> QualityProfilesBuilder:
        return QualityProfilesBuilder(config=self, profiles=list(self.quality_profiles))


@dataclass(slots=True)
class QualityProfilesBuilder:
    """Mutable stage for root-level quality profiles, sealed back into a frozen config."""

    config: ServiceConfiguration
    profiles: list[QualityProfileConfig] = field(default_factory=list[QualityProfileConfig])

    def find(self, name: str) -> int | None:
        wanted = name.casefold()
        return next(
            (
                index
                for index, profile in enumerate(self.profiles)
                if profile.name.casefold() == wanted
            ),
            None,
        )

    def add(self, profile: QualityProfileConfig) -> None:
        self.profiles.append(profile)

    def update(self, index: int, **changes: object) -> None:
        self.profiles[index] = self.profiles[index].model_copy(update=changes)

    def seal(self) -> ServiceConfiguration:
        return self.config.model_copy(update={"quality_profiles": tuple(self.profiles)})
