"""Pydantic models describing guide JSON files."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GuideBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TrashScores(GuideBaseModel):
    default: int | None = None


class CustomFormatPayload(GuideBaseModel):
    """Guide custom format; everything except ``trash_*`` is the API payload."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    trash_id: str = Field(min_length=1)
    trash_scores: TrashScores | None = None
    name: str = Field(min_length=1)


class TermPayload(GuideBaseModel):
    term: str


class PreferredTermsPayload(GuideBaseModel):
    score: int
    terms: list[TermPayload] = Field(default_factory=list[TermPayload])


class ReleaseProfilePayload(GuideBaseModel):
    trash_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    include_preferred_when_renaming: bool = Field(
        default=False,
        alias="includePreferredWhenRenaming",
    )
    required: list[TermPayload] = Field(default_factory=list[TermPayload])
    ignored: list[TermPayload] = Field(default_factory=list[TermPayload])
    preferred: list[PreferredTermsPayload] = Field(default_factory=list[PreferredTermsPayload])
