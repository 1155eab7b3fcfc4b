"""Explicit backend selection for the AI provider."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Optional

from workbook_studio.llm.anthropic_provider import AnthropicProvider
from workbook_studio.llm.base import AIProvider
from workbook_studio.llm.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class ProviderKind(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    AZURE = "azure"


_provider_cache: Optional[AIProvider] = None


def parse_provider_kind(raw: Optional[str]) -> ProviderKind:
    """Map an ``AI_PROVIDER`` value onto a known backend."""
    name = (raw or ProviderKind.ANTHROPIC.value).strip().lower()
    try:
        return ProviderKind(name)
    except ValueError:
        valid = ", ".join(kind.value for kind in ProviderKind)
        raise ValueError(f'Unknown AI_PROVIDER "{name}". Valid values: {valid}.') from None


def build_provider(kind: ProviderKind) -> AIProvider:
    if kind is ProviderKind.ANTHROPIC:
        return AnthropicProvider()
    if kind is ProviderKind.OPENAI:
        return OpenAIProvider()
    if kind is ProviderKind.AZURE:
        return OpenAIProvider(azure=True)
    raise ValueError(f"Unsupported provider kind: {kind}")


def get_ai_provider() -> AIProvider:
    """Return the process-wide provider chosen by ``AI_PROVIDER``."""
    global _provider_cache
    if _provider_cache is None:
        kind = parse_provider_kind(os.getenv("AI_PROVIDER"))
        _provider_cache = build_provider(kind)
        logger.info("AI provider selected: %s", _provider_cache.provider_name)
    return _provider_cache


def reset_ai_provider() -> None:
    global _provider_cache
    _provider_cache = None
