"""Pydantic models for the parts of Servarr API payloads the engine relies on."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ServarrBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class RecordPayload(ServarrBaseModel):
    """Any record with an id and a display name.

    Tags carry their name in ``label``.
    """

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "label"))
