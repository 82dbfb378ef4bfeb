# app/llm/service/provider/base_provider.py
from abc import ABC, abstractmethod
from typing import Sequence

from app.chat.entity.chat import ChatMessage


class BaseProvider(ABC):
    """Abstract base provider for all LLM integrations."""

    name: str = "base"

    @abstractmethod
    async def complete(self, message: str, history: Sequence[ChatMessage]) -> str:
        """Send `message` after replaying `history` and return the reply text."""
        pass

    def is_enabled(self) -> bool:
        """Whether this provider is enabled/usable (e.g., API key present)."""
        return True
