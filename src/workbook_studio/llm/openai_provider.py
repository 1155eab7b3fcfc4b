"""OpenAI and Azure OpenAI chat completion backend."""

from __future__ import annotations

import os
from typing import Any, Optional, Sequence

import openai

from workbook_studio.config import ai_timeout_sec
from workbook_studio.exceptions import ProviderTimeoutError, UpstreamModelError
from workbook_studio.llm.base import AIMessage, AIProvider

DEFAULT_MODEL = "gpt-4o"
AZURE_API_VERSION = "2024-02-01"


class OpenAIProvider(AIProvider):
    """Completion backend for OpenAI, or an Azure OpenAI deployment when ``azure=True``."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_sec: Optional[int] = None,
        client: Any = None,
        base_url: Optional[str] = None,
        azure: bool = False,
    ) -> None:
        self.azure = azure
        self.timeout_sec = timeout_sec if timeout_sec is not None else ai_timeout_sec()
        if self.timeout_sec <= 0:
            raise ValueError("timeout_sec must be > 0.")

        if azure:
            self.provider_name = "azure"
            self.api_key = api_key or os.getenv("AZURE_OPENAI_API_KEY", "")
            self.endpoint = base_url or os.getenv("AZURE_OPENAI_ENDPOINT", "")
            self.model = model or os.getenv("AZURE_OPENAI_DEPLOYMENT", "")
            if not (self.api_key and self.endpoint and self.model):
                raise ValueError(
                    "Azure OpenAI requires AZURE_OPENAI_API_KEY, AZURE_OPENAI_ENDPOINT, "
                    "and AZURE_OPENAI_DEPLOYMENT."
                )
        else:
            self.api_key = api_key or os.getenv("OPENAI_API_KEY", "")
            self.endpoint = base_url or os.getenv("OPENAI_BASE_URL")
            self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
            if not self.api_key:
                raise ValueError("OPENAI_API_KEY environment variable is not set.")

        if client is not None:
            self.client = client
        elif azure:
            self.client = openai.AzureOpenAI(
                api_key=self.api_key,
                azure_endpoint=self.endpoint,
                azure_deployment=self.model,
                api_version=AZURE_API_VERSION,
            )
        elif self.endpoint:
            self.client = openai.OpenAI(api_key=self.api_key, base_url=self.endpoint)
        else:
            self.client = openai.OpenAI(api_key=self.api_key)

    def complete(self, messages: Sequence[AIMessage], system_prompt: str) -> str:
        chat = [{"role": "system", "content": system_prompt}]
        chat.extend({"role": m.role, "content": m.content} for m in messages)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=chat,
                timeout=self.timeout_sec,
            )
        except openai.APITimeoutError as exc:
            raise ProviderTimeoutError(
                f"OpenAI request timed out after {self.timeout_sec}s."
            ) from exc
        except openai.APIError as exc:
            raise UpstreamModelError(f"OpenAI request failed: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return str(getattr(message, "content", None) or "")
