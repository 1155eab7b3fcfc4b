"""Provider-agnostic text completion interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Sequence


@dataclass(frozen=True)
class AIMessage:
    """One chat turn sent to a provider."""

    role: Literal["user", "assistant"]
    content: str


class AIProvider(ABC):
    """Uniform completion contract implemented by every backend."""

    provider_name: str = "base"

    @abstractmethod
    def complete(self, messages: Sequence[AIMessage], system_prompt: str) -> str:
        """Return the model's text reply for ``messages`` under ``system_prompt``."""
