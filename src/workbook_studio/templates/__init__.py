"""Template registry and generation entry point."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from openpyxl import Workbook

from workbook_studio.api_models import AzureResource
from workbook_studio.exceptions import UnknownTemplateError
from workbook_studio.templates.azure_calculator import AZURE_CALCULATOR_TEMPLATE
from workbook_studio.templates.budget import BUDGET_TEMPLATE
from workbook_studio.templates.gantt import GANTT_TEMPLATE
from workbook_studio.templates.invoice import INVOICE_TEMPLATE
from workbook_studio.templates.rbac import RBAC_TEMPLATE
from workbook_studio.templates.schema import (
    ConfigField,
    FieldType,
    SelectOption,
    TemplateConfig,
    TemplateDefinition,
    default_config,
    validate_config,
)
from workbook_studio.templates.user_stories import USER_STORIES_TEMPLATE

TEMPLATES: tuple[TemplateDefinition, ...] = (
    BUDGET_TEMPLATE,
    INVOICE_TEMPLATE,
    GANTT_TEMPLATE,
    RBAC_TEMPLATE,
    AZURE_CALCULATOR_TEMPLATE,
    USER_STORIES_TEMPLATE,
)

TEMPLATE_MAP: dict[str, TemplateDefinition] = {template.id: template for template in TEMPLATES}


def get_template(template_id: str) -> TemplateDefinition:
    template = TEMPLATE_MAP.get(template_id)
    if template is None:
        raise UnknownTemplateError(template_id)
    return template


def generate_workbook(
    template_id: str,
    config: Optional[Mapping[str, Any]],
    resources: Optional[Sequence[AzureResource]] = None,
) -> Workbook:
    """Validate ``config`` against the template schema and run its builder.

    ``resources`` is only accepted by templates that support AI resolution.
    """
    template = get_template(template_id)
    validated = validate_config(template, config)
    if resources:
        if not template.supports_ai:
            raise ValueError(f"Template '{template_id}' does not accept resolved resources")
        return template.builder(validated, list(resources))
    return template.builder(validated)


__all__ = [
    "TEMPLATES",
    "TEMPLATE_MAP",
    "ConfigField",
    "FieldType",
    "SelectOption",
    "TemplateConfig",
    "TemplateDefinition",
    "default_config",
    "generate_workbook",
    "get_template",
    "validate_config",
]
