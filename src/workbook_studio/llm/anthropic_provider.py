"""Anthropic Messages API backend."""

from __future__ import annotations

import os
from typing import Any, Optional, Sequence

import anthropic

from workbook_studio.config import ai_timeout_sec
from workbook_studio.exceptions import ProviderTimeoutError, UpstreamModelError
from workbook_studio.llm.base import AIMessage, AIProvider

DEFAULT_MODEL = "claude-sonnet-4-6"
MAX_TOKENS = 4096


class AnthropicProvider(AIProvider):
    """Completion backend for Claude models."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_sec: Optional[int] = None,
        client: Any = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY", "")
        self.model = model or os.getenv("ANTHROPIC_MODEL", DEFAULT_MODEL)
        self.timeout_sec = timeout_sec if timeout_sec is not None else ai_timeout_sec()
        self.base_url = base_url or os.getenv("ANTHROPIC_BASE_URL")
        if self.timeout_sec <= 0:
            raise ValueError("timeout_sec must be > 0.")
        self._ensure_api_key()
        if client is not None:
            self.client = client
        elif self.base_url:
            self.client = anthropic.Anthropic(api_key=self.api_key, base_url=self.base_url)
        else:
            self.client = anthropic.Anthropic(api_key=self.api_key)

    def _ensure_api_key(self) -> None:
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is not set.")

    def complete(self, messages: Sequence[AIMessage], system_prompt: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=system_prompt,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                timeout=self.timeout_sec,
            )
        except anthropic.APITimeoutError as exc:
            raise ProviderTimeoutError(
                f"Anthropic request timed out after {self.timeout_sec}s."
            ) from exc
        except anthropic.APIError as exc:
            raise UpstreamModelError(f"Anthropic request failed: {exc}") from exc

        content = list(getattr(response, "content", None) or [])
        if not content or getattr(content[0], "type", None) != "text":
            raise UpstreamModelError("Unexpected response type from Anthropic.")
        return str(content[0].text)
