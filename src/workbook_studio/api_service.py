"""Service-layer handlers for API endpoints."""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass

from openpyxl import Workbook
from pydantic import TypeAdapter

from workbook_studio.api_models import (
    AzureResource,
    ChatRequest,
    GenerateRequest,
    PreviewRequest,
    PreviewResponse,
    ResourceResolutionResponse,
    SelectOptionModel,
    TemplateFieldModel,
    TemplateListResponse,
    TemplateSummary,
)
from workbook_studio.exceptions import WorkbookSerializationError
from workbook_studio.previews import generate_preview
from workbook_studio.resolution import resolve_resources
from workbook_studio.templates import TEMPLATES, generate_workbook, get_template
from workbook_studio.templates.schema import TemplateDefinition

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_RESOURCE_LIST = TypeAdapter(list[AzureResource])


@dataclass(frozen=True)
class GeneratedWorkbook:
    content: bytes
    filename: str


def workbook_filename(template_name: str) -> str:
    """``"Invoice / Quote"`` -> ``"Invoice___Quote.xlsx"``."""
    return f"{_NON_ALPHANUMERIC.sub('_', template_name)}.xlsx"


def workbook_to_bytes(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    try:
        workbook.save(buffer)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Workbook serialization failed")
        raise WorkbookSerializationError(f"Failed to serialize workbook: {exc}") from exc
    return buffer.getvalue()


def _template_summary(template: TemplateDefinition) -> TemplateSummary:
    fields = [
        TemplateFieldModel(
            key=field.key,
            label=field.label,
            type=field.type.value,
            default_value=field.default,
            placeholder=field.placeholder,
            options=[SelectOptionModel(label=o.label, value=o.value) for o in field.options] or None,
            min=field.min,
            max=field.max,
            group=field.group,
        )
        for field in template.fields
    ]
    return TemplateSummary(
        id=template.id,
        name=template.name,
        description=template.description,
        category=template.category,
        icon=template.icon,
        tags=list(template.tags),
        fields=fields,
        supports_ai=template.supports_ai,
    )


def run_list_templates() -> TemplateListResponse:
    return TemplateListResponse(templates=[_template_summary(template) for template in TEMPLATES])


def run_generate(payload: GenerateRequest) -> GeneratedWorkbook:
    """Build and serialize the requested workbook.

    Resolved resources may arrive either as ``payload.resources`` or inside the
    config under ``resources``; the former wins.
    """
    template = get_template(payload.template_id)
    config = dict(payload.config)
    resources = payload.resources
    embedded = config.pop("resources", None)
    if resources is None and embedded:
        resources = _RESOURCE_LIST.validate_python(embedded)

    workbook = generate_workbook(template.id, config, resources)
    content = workbook_to_bytes(workbook)
    logger.info("Generated %s workbook (%d bytes)", template.id, len(content))
    return GeneratedWorkbook(content=content, filename=workbook_filename(template.name))


def run_resolve_resources(template_id: str, payload: ChatRequest) -> ResourceResolutionResponse:
    template = get_template(template_id)
    if not template.supports_ai:
        raise ValueError(f"AI resolution is not available for template '{template.id}'")
    return resolve_resources(payload.message, payload.config)


def run_preview(payload: PreviewRequest) -> PreviewResponse:
    template = get_template(payload.template_id)
    return PreviewResponse(template_id=template.id, rows=generate_preview(template.id, payload.config))
