"""Custom field values for trades.

A trade stores one value per custom field of its strategy. On the way in each
raw JSON value is parsed into a tagged variant (``TextValue``,
``SelectValue``, ``MultiSelectValue``) according to the field definition; on
the way out the variants are dumped back to plain JSON (``str`` or
``list[str]``).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from journal.errors import ValidationFailed
from journal.models.enums import FieldType
from journal.models.strategy import CustomField

ERROR_PREFIX = "customValues"


@dataclass(frozen=True)
class TextValue:
    value: str

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class SelectValue:
    value: str

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class MultiSelectValue:
    values: tuple[str, ...]

    def to_json(self) -> list[str]:
        return list(self.values)


CustomValue = Union[TextValue, SelectValue, MultiSelectValue]


def _parse_value(field: CustomField, raw: Any) -> CustomValue | None:
    """Parse one raw value. Returns None when the value is absent or blank."""
    if raw is None:
        return None

    if field.type == FieldType.TEXT:
        if not isinstance(raw, str):
            raise ValueError("must be text")
        text = raw.strip()
        return TextValue(text) if text else None

    options = field.options or []
    if field.type == FieldType.SELECT:
        if not isinstance(raw, str):
            raise ValueError("must be a single option")
        if raw == "":
            return None
        if raw not in options:
            raise ValueError(f"must be one of: {', '.join(options)}")
        return SelectValue(raw)

    # multi-select
    if not isinstance(raw, (list, tuple)):
        raise ValueError("must be a list of options")
    chosen: list[str] = []
    for item in raw:
        if not isinstance(item, str) or item not in options:
            raise ValueError(f"every choice must be one of: {', '.join(options)}")
        if item not in chosen:
            chosen.append(item)
    return MultiSelectValue(tuple(chosen)) if chosen else None


def parse_custom_values(
    fields: Iterable[CustomField], raw: Mapping[str, Any] | None
) -> dict[str, CustomValue]:
    """Validate raw values against the field definitions.

    Raises ValidationFailed with one entry per offending field, keyed
    ``customValues.<field name>``. Keys that name no field are rejected.
    """
    raw = dict(raw or {})
    fields = list(fields)
    known = {f.name for f in fields}
    errors: dict[str, list[str]] = {}

    for key in raw:
        if key not in known:
            errors[f"{ERROR_PREFIX}.{key}"] = ["is not a field of this strategy"]

    parsed: dict[str, CustomValue] = {}
    for field in fields:
        try:
            value = _parse_value(field, raw.get(field.name))
        except ValueError as e:
            errors[f"{ERROR_PREFIX}.{field.name}"] = [str(e)]
            continue
        if value is None:
            if field.required:
                errors[f"{ERROR_PREFIX}.{field.name}"] = ["is required"]
            continue
        parsed[field.name] = value

    if errors:
        raise ValidationFailed(errors=errors)
    return parsed


def dump_custom_values(values: Mapping[str, CustomValue]) -> dict[str, Any]:
    return {name: value.to_json() for name, value in values.items()}


def merge_custom_values(
    stored: Mapping[str, Any], fresh: Mapping[str, Any], fields: Iterable[CustomField]
) -> dict[str, Any]:
    """Replace the values of current fields, keeping stored values of removed fields."""
    current = {f.name for f in fields}
    merged = {name: value for name, value in stored.items() if name not in current}
    merged.update(fresh)
    return merged


def visible_custom_values(stored: Mapping[str, Any], fields: Iterable[CustomField]) -> dict[str, Any]:
    """Only the values of fields the strategy still defines."""
    current = {f.name for f in fields}
    return {name: value for name, value in stored.items() if name in current}
