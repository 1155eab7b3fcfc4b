"""Error types surfaced by the generation and AI resolution boundaries."""

from __future__ import annotations


class ConfigValidationError(ValueError):
    """A template config does not match its declared field schema."""

    def __init__(self, template_id: str, errors: list[str]) -> None:
        self.template_id = template_id
        self.errors = list(errors)
        super().__init__(f"Invalid config for template '{template_id}': " + "; ".join(self.errors))


class UnknownTemplateError(ValueError):
    """No template is registered under the requested id."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}")


class UpstreamModelError(RuntimeError):
    """The AI provider failed or returned something we cannot use."""


class ProviderTimeoutError(UpstreamModelError):
    """The AI provider did not answer within the configured bound."""


class AIResponseFormatError(UpstreamModelError):
    """The AI reply was not a JSON object matching the resource schema."""


class WorkbookSerializationError(RuntimeError):
    """Writing a generated workbook to bytes failed."""
