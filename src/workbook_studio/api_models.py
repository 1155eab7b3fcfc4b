"""Pydantic API contracts for backend endpoints.

Wire payloads use camelCase keys (``templateId``, ``serviceName``); Python code
reads the snake_case attribute names.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ConfigValue = Union[str, int, float, bool, list[str]]


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class AIResourceItem(_CamelModel):
    """One resource claimed by the model. Identifying fields only; never a price."""

    name: str = ""
    service_name: str
    sku_name: str
    environment: str = "Production"
    quantity: float = 1
    category: str = "Other"
    notes: Optional[str] = None


class AIReply(_CamelModel):
    resources: list[AIResourceItem]
    summary: Optional[str] = None


class AzureResource(_CamelModel):
    """A resolved, priced line item for the Azure cost estimate."""

    name: str
    service_name: str
    sku_name: str
    environment: str = "Production"
    quantity: int = Field(ge=1, default=1)
    unit_monthly_cost: float = Field(ge=0, default=0.0)
    category: str = "Other"
    notes: Optional[str] = None


class ResourceResolutionResponse(_CamelModel):
    resources: list[AzureResource]
    summary: str
    total_monthly: float


class ChatRequest(_CamelModel):
    message: str = Field(max_length=8000)
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message is required")
        return value


class GenerateRequest(_CamelModel):
    template_id: str = Field(min_length=1)
    config: dict[str, Any]
    resources: Optional[list[AzureResource]] = None


class PreviewRequest(_CamelModel):
    template_id: str = Field(min_length=1)
    config: dict[str, Any] = Field(default_factory=dict)


class PreviewCellStyle(_CamelModel):
    background: Optional[str] = None
    color: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    align: Optional[Literal["left", "center", "right"]] = None


class PreviewCell(_CamelModel):
    value: str
    is_header: Optional[bool] = None
    col_span: Optional[int] = None
    style: PreviewCellStyle = Field(default_factory=PreviewCellStyle)


class PreviewResponse(_CamelModel):
    template_id: str
    rows: list[list[PreviewCell]]


class SelectOptionModel(_CamelModel):
    label: str
    value: str


class TemplateFieldModel(_CamelModel):
    key: str
    label: str
    type: str
    default_value: ConfigValue
    placeholder: Optional[str] = None
    options: Optional[list[SelectOptionModel]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    group: Optional[str] = None


class TemplateSummary(_CamelModel):
    id: str
    name: str
    description: str
    category: str
    icon: str
    tags: list[str]
    fields: list[TemplateFieldModel]
    supports_ai: bool = False


class TemplateListResponse(_CamelModel):
    templates: list[TemplateSummary]
