"""Template field schemas and config validation.

Each template declares its fields once; ``validate_config`` turns an untyped
request payload into a complete, type-checked config before any builder runs.
"""

from __future__ import annotations

import copy
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from openpyxl import Workbook

from workbook_studio.exceptions import ConfigValidationError

ConfigValue = Union[str, int, float, bool, list[str]]
TemplateConfig = dict[str, ConfigValue]

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    COLOR = "color"
    NUMBER = "number"
    SELECT = "select"
    TOGGLE = "toggle"
    TAGS = "tags"


@dataclass(frozen=True)
class SelectOption:
    label: str
    value: str


@dataclass(frozen=True)
class ConfigField:
    """One configurable input. For ``tags`` fields ``min``/``max`` bound the item count."""

    key: str
    label: str
    type: FieldType
    default: ConfigValue
    placeholder: Optional[str] = None
    options: tuple[SelectOption, ...] = ()
    min: Optional[float] = None
    max: Optional[float] = None
    group: Optional[str] = None


@dataclass(frozen=True)
class TemplateDefinition:
    id: str
    name: str
    description: str
    category: str
    icon: str
    tags: tuple[str, ...]
    fields: tuple[ConfigField, ...]
    builder: Callable[..., Workbook] = field(compare=False, repr=False)
    supports_ai: bool = False

    def get_field(self, key: str) -> ConfigField:
        for config_field in self.fields:
            if config_field.key == key:
                return config_field
        raise KeyError(key)


def options(*pairs: tuple[str, str]) -> tuple[SelectOption, ...]:
    """Build select options from ``(label, value)`` pairs."""
    return tuple(SelectOption(label=label, value=value) for label, value in pairs)


def default_config(template: TemplateDefinition) -> TemplateConfig:
    return {f.key: copy.deepcopy(f.default) for f in template.fields}


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return int(parsed) if parsed.is_integer() else parsed
    return None


def _validate_field(config_field: ConfigField, value: Any, errors: list[str]) -> ConfigValue:
    key = config_field.key
    kind = config_field.type

    if kind in (FieldType.TEXT, FieldType.TEXTAREA, FieldType.COLOR, FieldType.SELECT):
        if isinstance(value, (int, float)) and not isinstance(value, bool) and kind is not FieldType.COLOR:
            value = str(value)
        if not isinstance(value, str):
            errors.append(f"'{key}' must be a string")
            return config_field.default
        if kind is FieldType.COLOR and not _HEX_COLOR.match(value):
            errors.append(f"'{key}' must be a #RRGGBB colour, got '{value}'")
        if kind is FieldType.SELECT:
            allowed = [opt.value for opt in config_field.options]
            if value not in allowed:
                errors.append(f"'{key}' must be one of: {', '.join(allowed)}")
        return value

    if kind is FieldType.NUMBER:
        number = _coerce_number(value)
        if number is None:
            errors.append(f"'{key}' must be a number")
            return config_field.default
        if isinstance(number, float) and not math.isfinite(number):
            errors.append(f"'{key}' must be a finite number")
            return config_field.default
        if config_field.min is not None and number < config_field.min:
            errors.append(f"'{key}' must be >= {config_field.min:g}")
        if config_field.max is not None and number > config_field.max:
            errors.append(f"'{key}' must be <= {config_field.max:g}")
        return number

    if kind is FieldType.TOGGLE:
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        if not isinstance(value, bool):
            errors.append(f"'{key}' must be a boolean")
            return config_field.default
        return value

    # FieldType.TAGS
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        errors.append(f"'{key}' must be a list of strings")
        return copy.deepcopy(config_field.default)
    items = [item.strip() for item in value if item.strip()]
    if config_field.min is not None and len(items) < config_field.min:
        errors.append(f"'{key}' needs at least {config_field.min:g} item(s)")
    if config_field.max is not None and len(items) > config_field.max:
        errors.append(f"'{key}' allows at most {config_field.max:g} item(s)")
    return items


def validate_config(template: TemplateDefinition, raw: Mapping[str, Any] | None) -> TemplateConfig:
    """Return a defaulted, type-checked copy of ``raw`` for ``template``.

    Absent or null keys take the declared default; unknown keys are dropped.
    Raises ConfigValidationError listing every problem found.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigValidationError(template.id, ["config must be an object"])

    errors: list[str] = []
    validated: TemplateConfig = {}
    for config_field in template.fields:
        value = raw.get(config_field.key)
        if value is None:
            validated[config_field.key] = copy.deepcopy(config_field.default)
            continue
        validated[config_field.key] = _validate_field(config_field, value, errors)

    if errors:
        raise ConfigValidationError(template.id, errors)
    return validated
