"""Workbook Studio: formatted spreadsheet templates with AI-priced Azure estimates.

Generates styled, formula-driven .xlsx workbooks (budget, invoice, gantt, RBAC,
Azure cost calculator, user stories) from a per-template configuration, and
resolves free-text Azure infrastructure descriptions into catalogue-priced rows.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from workbook_studio.api_models import AzureResource, ResourceResolutionResponse
from workbook_studio.api_service import (
    GeneratedWorkbook,
    run_generate,
    run_list_templates,
    run_preview,
    run_resolve_resources,
    workbook_to_bytes,
)
from workbook_studio.catalogue_text import get_service_catalogue_text, refresh_catalogue_text_cache
from workbook_studio.exceptions import (
    AIResponseFormatError,
    ConfigValidationError,
    ProviderTimeoutError,
    UnknownTemplateError,
    UpstreamModelError,
    WorkbookSerializationError,
)
from workbook_studio.llm import AIMessage, AIProvider, get_ai_provider
from workbook_studio.previews import generate_preview
from workbook_studio.pricing import (
    PricingEntry,
    find_pricing,
    get_annual_from_monthly,
    get_monthly_from_hourly,
    get_pricing_lookup,
    get_service_skus,
    refresh_pricing_cache,
)
from workbook_studio.resolution import parse_ai_reply, resolve_quantity, resolve_resources
from workbook_studio.templates import (
    TEMPLATE_MAP,
    TEMPLATES,
    TemplateDefinition,
    generate_workbook,
    get_template,
    validate_config,
)

__all__ = [
    "__version__",
    # Templates
    "TEMPLATES",
    "TEMPLATE_MAP",
    "TemplateDefinition",
    "generate_workbook",
    "get_template",
    "validate_config",
    "generate_preview",
    # Pricing catalogue
    "PricingEntry",
    "find_pricing",
    "get_service_skus",
    "get_monthly_from_hourly",
    "get_annual_from_monthly",
    "get_pricing_lookup",
    "refresh_pricing_cache",
    "get_service_catalogue_text",
    "refresh_catalogue_text_cache",
    # AI resolution
    "AIMessage",
    "AIProvider",
    "get_ai_provider",
    "AzureResource",
    "ResourceResolutionResponse",
    "parse_ai_reply",
    "resolve_quantity",
    "resolve_resources",
    # Service layer
    "GeneratedWorkbook",
    "run_generate",
    "run_list_templates",
    "run_preview",
    "run_resolve_resources",
    "workbook_to_bytes",
    # Errors
    "AIResponseFormatError",
    "ConfigValidationError",
    "ProviderTimeoutError",
    "UnknownTemplateError",
    "UpstreamModelError",
    "WorkbookSerializationError",
]
