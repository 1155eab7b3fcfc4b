"""AI provider abstraction used by resource resolution."""

from __future__ import annotations

from workbook_studio.llm.anthropic_provider import AnthropicProvider
from workbook_studio.llm.base import AIMessage, AIProvider
from workbook_studio.llm.factory import (
    ProviderKind,
    build_provider,
    get_ai_provider,
    parse_provider_kind,
    reset_ai_provider,
)
from workbook_studio.llm.openai_provider import OpenAIProvider
from workbook_studio.llm.prompting import AZURE_RESOURCE_SYSTEM_PROMPT, build_resource_system_prompt

__all__ = [
    "AIMessage",
    "AIProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "ProviderKind",
    "build_provider",
    "get_ai_provider",
    "parse_provider_kind",
    "reset_ai_provider",
    "AZURE_RESOURCE_SYSTEM_PROMPT",
    "build_resource_system_prompt",
]
