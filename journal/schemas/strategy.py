"""Pydantic schemas for Strategy API."""

import uuid
from datetime import datetime

from pydantic import Field, computed_field, field_validator, model_validator

from journal.models.enums import FieldType, Instrument
from journal.schemas.common import CamelModel
from journal.utils.text import create_slug

SELECT_TYPES = (FieldType.SELECT, FieldType.MULTI_SELECT)


def _trim_required(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError("must not be empty")
    return text


class CustomFieldIn(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    type: FieldType
    options: list[str] = Field(default_factory=list)
    required: bool = False

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        return _trim_required(value)

    @field_validator("options", mode="before")
    @classmethod
    def _none_means_no_options(cls, value):
        return [] if value is None else value

    @field_validator("options")
    @classmethod
    def _clean_options(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for option in value:
            text = option.strip()
            if text and text not in cleaned:
                cleaned.append(text)
        return cleaned

    @model_validator(mode="after")
    def _validate_options(self):
        if self.type in SELECT_TYPES and not self.options:
            raise ValueError(f"{self.type.value} field '{self.name}' needs at least one option")
        if self.type == FieldType.TEXT:
            self.options = []
        return self


class StrategyCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    instrument: Instrument
    custom_fields: list[CustomFieldIn] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        return _trim_required(value)

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _unique_field_names(self):
        seen: set[str] = set()
        for custom_field in self.custom_fields:
            key = custom_field.name.lower()
            if key in seen:
                raise ValueError(f"duplicate custom field name '{custom_field.name}'")
            seen.add(key)
        return self


class StrategyUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    instrument: Instrument | None = None
    custom_fields: list[CustomFieldIn] | None = None

    model_config = {"extra": "forbid"}


class CustomFieldRead(CamelModel):
    id: uuid.UUID
    name: str
    type: FieldType
    options: list[str] | None
    required: bool


class StrategyRead(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None
    instrument: Instrument
    custom_fields: list[CustomFieldRead]
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def slug(self) -> str:
        return create_slug(self.name)
