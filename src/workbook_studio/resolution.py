"""Free-text to priced Azure resources.

The model only names services, SKUs, quantities and categories. Every cost in
the output is looked up in the pricing catalogue here; nothing numeric from
the model reply is trusted except the quantity, which is clamped.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from workbook_studio.api_models import AIReply, AIResourceItem, AzureResource, ResourceResolutionResponse
from workbook_studio.catalogue_text import get_service_catalogue_text
from workbook_studio.config import SKU_NOT_FOUND_NOTE
from workbook_studio.exceptions import (
    AIResponseFormatError,
    ProviderTimeoutError,
    UpstreamModelError,
)
from workbook_studio.llm.base import AIMessage, AIProvider
from workbook_studio.llm.factory import get_ai_provider
from workbook_studio.llm.prompting import build_resource_system_prompt
from workbook_studio.pricing import find_pricing, get_unit_monthly_cost

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```$")

REPHRASE_MESSAGE = "AI returned an unexpected format. Please try rephrasing your request."


def strip_code_fences(text: str) -> str:
    """Remove an optional markdown code fence wrapped around a reply."""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_ai_reply(raw: str) -> AIReply:
    """Parse a model reply into ``{resources, summary}`` or fail terminally."""
    cleaned = strip_code_fences(raw)
    try:
        payload: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("AI returned non-JSON reply: %.500s", raw)
        raise AIResponseFormatError(REPHRASE_MESSAGE) from exc

    if not isinstance(payload, dict):
        logger.warning("AI reply was JSON but not an object: %.500s", raw)
        raise AIResponseFormatError(REPHRASE_MESSAGE)
    if not isinstance(payload.get("resources"), list):
        raise AIResponseFormatError("AI response missing resources array.")

    try:
        return AIReply.model_validate(payload)
    except ValidationError as exc:
        logger.warning("AI resources failed schema validation: %s", exc)
        raise AIResponseFormatError(
            f"AI response resources did not match the expected schema ({exc.error_count()} error(s))."
        ) from exc


def resolve_quantity(quantity: float) -> int:
    """Clamp a claimed quantity to a positive whole number (half rounds up)."""
    if not math.isfinite(quantity):
        return 1
    return max(1, math.floor(quantity + 0.5))


def _append_note(existing: Optional[str], note: str) -> str:
    return f"{existing}; {note}" if existing else note


def resolve_resource(item: AIResourceItem) -> AzureResource:
    """Price one claimed resource against the catalogue."""
    entry = find_pricing(item.service_name, item.sku_name)
    notes = item.notes or None
    if entry is not None:
        unit_monthly_cost = get_unit_monthly_cost(entry)
    else:
        logger.info("Catalogue miss for %s|%s", item.service_name, item.sku_name)
        unit_monthly_cost = 0.0
        notes = _append_note(notes, SKU_NOT_FOUND_NOTE)

    return AzureResource(
        name=item.name or item.service_name,
        service_name=item.service_name,
        sku_name=item.sku_name,
        environment=item.environment,
        quantity=resolve_quantity(item.quantity),
        unit_monthly_cost=unit_monthly_cost,
        category=item.category,
        notes=notes,
    )


def total_monthly_cost(resources: list[AzureResource]) -> float:
    return sum(resource.unit_monthly_cost * resource.quantity for resource in resources)


def _call_provider(provider: AIProvider, message: str, system_prompt: str) -> str:
    try:
        return provider.complete([AIMessage(role="user", content=message)], system_prompt)
    except UpstreamModelError:
        raise
    except TimeoutError as exc:
        raise ProviderTimeoutError("AI provider timed out.") from exc
    except Exception as exc:  # noqa: BLE001
        raise UpstreamModelError(f"AI provider request failed: {exc}") from exc


def resolve_resources(
    message: str,
    config: Optional[Mapping[str, Any]] = None,
    provider: Optional[AIProvider] = None,
) -> ResourceResolutionResponse:
    """Turn a free-text infrastructure description into priced resources.

    One provider call per invocation; failures are surfaced, never retried.
    ``config`` is display context only and is not sent to the model.
    """
    if not message or not message.strip():
        raise ValueError("message is required")

    system_prompt = build_resource_system_prompt(get_service_catalogue_text())
    if provider is None:
        try:
            provider = get_ai_provider()
        except ValueError as exc:
            raise UpstreamModelError(f"AI provider is not configured: {exc}") from exc

    currency = (config or {}).get("currency", "AUD")
    logger.info("Resolving resources via %s (display currency %s)", provider.provider_name, currency)

    raw_reply = _call_provider(provider, message, system_prompt)
    reply = parse_ai_reply(raw_reply)
    resources = [resolve_resource(item) for item in reply.resources]
    return ResourceResolutionResponse(
        resources=resources,
        summary=reply.summary or "",
        total_monthly=total_monthly_cost(resources),
    )
