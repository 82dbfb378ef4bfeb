from typing import Optional, Sequence

from app.chat.entity.chat import ChatMessage
from app.core.errors import ValidationError
from app.llm.service.provider.base_provider import BaseProvider


class ConversationService:
    """Validates a chat turn and hands it to the configured provider."""

    def __init__(self, provider: BaseProvider):
        self.provider = provider

    async def complete(self, message: Optional[str], history: Optional[Sequence[ChatMessage]] = None) -> str:
        if not message or not message.strip():
            raise ValidationError("The 'message' field is required.")

        # The provider session is rebuilt from the full history on every call
        return await self.provider.complete(message, list(history or []))
