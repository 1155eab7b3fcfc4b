from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import anthropic
import httpx
import openai
import pytest

from workbook_studio.exceptions import ProviderTimeoutError, UpstreamModelError
from workbook_studio.llm import (
    AIMessage,
    AnthropicProvider,
    OpenAIProvider,
    ProviderKind,
    build_provider,
    get_ai_provider,
    parse_provider_kind,
    reset_ai_provider,
)

MESSAGES = [AIMessage(role="user", content="two vms")]


class _Recorder:
    """Stands in for an SDK ``create`` method."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.kwargs: dict[str, Any] = {}

    def __call__(self, **kwargs: Any) -> Any:
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def _anthropic_client(create: _Recorder) -> SimpleNamespace:
    return SimpleNamespace(messages=SimpleNamespace(create=create))


def _openai_client(create: _Recorder) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def _request(url: str) -> httpx.Request:
    return httpx.Request("POST", url)


def test_anthropic_complete_returns_text() -> None:
    create = _Recorder(SimpleNamespace(content=[SimpleNamespace(type="text", text='{"resources": []}')]))
    provider = AnthropicProvider(api_key="test-key", model="claude-test", timeout_sec=12, client=_anthropic_client(create))

    assert provider.complete(MESSAGES, "system prompt") == '{"resources": []}'
    assert create.kwargs["model"] == "claude-test"
    assert create.kwargs["system"] == "system prompt"
    assert create.kwargs["messages"] == [{"role": "user", "content": "two vms"}]
    assert create.kwargs["timeout"] == 12


def test_anthropic_non_text_block_is_upstream_error() -> None:
    create = _Recorder(SimpleNamespace(content=[SimpleNamespace(type="tool_use", text="")]))
    provider = AnthropicProvider(api_key="test-key", client=_anthropic_client(create))
    with pytest.raises(UpstreamModelError, match="Unexpected response type"):
        provider.complete(MESSAGES, "system")


def test_anthropic_timeout_maps_to_provider_timeout() -> None:
    error = anthropic.APITimeoutError(request=_request("https://api.anthropic.com/v1/messages"))
    provider = AnthropicProvider(api_key="test-key", timeout_sec=5, client=_anthropic_client(_Recorder(error=error)))
    with pytest.raises(ProviderTimeoutError, match="timed out after 5s"):
        provider.complete(MESSAGES, "system")


def test_anthropic_api_error_maps_to_upstream_error() -> None:
    error = anthropic.APIConnectionError(request=_request("https://api.anthropic.com/v1/messages"))
    provider = AnthropicProvider(api_key="test-key", client=_anthropic_client(_Recorder(error=error)))
    with pytest.raises(UpstreamModelError, match="Anthropic request failed"):
        provider.complete(MESSAGES, "system")


def test_anthropic_missing_key_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        AnthropicProvider(client=object())


def test_anthropic_constructor_validates_timeout() -> None:
    with pytest.raises(ValueError, match="timeout_sec must be > 0"):
        AnthropicProvider(api_key="x", timeout_sec=0, client=object())


def test_provider_timeout_defaults_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKBOOK_STUDIO_AI_TIMEOUT_SEC", "45")
    assert AnthropicProvider(api_key="x", client=object()).timeout_sec == 45
    assert OpenAIProvider(api_key="x", client=object()).timeout_sec == 45


def test_openai_complete_prepends_system_message() -> None:
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="ok"))])
    create = _Recorder(response)
    provider = OpenAIProvider(api_key="test-key", model="gpt-test", client=_openai_client(create))

    assert provider.complete(MESSAGES, "system prompt") == "ok"
    assert create.kwargs["model"] == "gpt-test"
    assert create.kwargs["messages"] == [
        {"role": "system", "content": "system prompt"},
        {"role": "user", "content": "two vms"},
    ]


def test_openai_empty_choices_returns_empty_text() -> None:
    provider = OpenAIProvider(api_key="test-key", client=_openai_client(_Recorder(SimpleNamespace(choices=[]))))
    assert provider.complete(MESSAGES, "system") == ""


def test_openai_timeout_maps_to_provider_timeout() -> None:
    error = openai.APITimeoutError(request=_request("https://api.openai.com/v1/chat/completions"))
    provider = OpenAIProvider(api_key="test-key", client=_openai_client(_Recorder(error=error)))
    with pytest.raises(ProviderTimeoutError):
        provider.complete(MESSAGES, "system")


def test_openai_api_error_maps_to_upstream_error() -> None:
    error = openai.APIConnectionError(request=_request("https://api.openai.com/v1/chat/completions"))
    provider = OpenAIProvider(api_key="test-key", client=_openai_client(_Recorder(error=error)))
    with pytest.raises(UpstreamModelError, match="OpenAI request failed"):
        provider.complete(MESSAGES, "system")


def test_openai_missing_key_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        OpenAIProvider(client=object())


def test_azure_requires_endpoint_and_deployment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValueError, match="AZURE_OPENAI_ENDPOINT"):
        OpenAIProvider(api_key="x", azure=True, client=object())


def test_azure_provider_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "azure-key")
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o-estimates")
    provider = OpenAIProvider(azure=True, client=object())
    assert provider.provider_name == "azure"
    assert provider.model == "gpt-4o-estimates"
    assert provider.endpoint == "https://example.openai.azure.com"


def test_parse_provider_kind() -> None:
    assert parse_provider_kind(None) is ProviderKind.ANTHROPIC
    assert parse_provider_kind("") is ProviderKind.ANTHROPIC
    assert parse_provider_kind(" OpenAI ") is ProviderKind.OPENAI
    assert parse_provider_kind("azure") is ProviderKind.AZURE
    with pytest.raises(ValueError, match='Unknown AI_PROVIDER "gemini"'):
        parse_provider_kind("gemini")


def test_build_provider_for_each_kind(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "a-key")
    monkeypatch.setenv("OPENAI_API_KEY", "o-key")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "az-key")
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")

    assert isinstance(build_provider(ProviderKind.ANTHROPIC), AnthropicProvider)
    openai_provider = build_provider(ProviderKind.OPENAI)
    assert isinstance(openai_provider, OpenAIProvider)
    assert not openai_provider.azure
    azure_provider = build_provider(ProviderKind.AZURE)
    assert isinstance(azure_provider, OpenAIProvider)
    assert azure_provider.azure


def test_get_ai_provider_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "o-key")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)

    first = get_ai_provider()
    assert isinstance(first, OpenAIProvider)
    assert get_ai_provider() is first
    reset_ai_provider()
    assert get_ai_provider() is not first


def test_get_ai_provider_unknown_kind(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_PROVIDER", "bard")
    with pytest.raises(ValueError, match="Valid values: anthropic, openai, azure"):
        get_ai_provider()
