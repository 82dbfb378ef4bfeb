# app/chat/entity/chat.py
"""
Models for chat messages and recorded chat sessions.
Sessions are written by an external process, so their known fields are not
type-checked and unknown fields are preserved.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    USER = "user"
    MODEL = "model"

    @classmethod
    def from_author(cls, author: Any) -> "MessageRole":
        """Only "model" maps to MODEL; every other value is a user turn."""
        return cls.MODEL if author == cls.MODEL.value else cls.USER


class ChatMessage(BaseModel):
    """A single message of the running conversation kept by the client."""
    author: Any = None
    content: Optional[str] = ""

    @property
    def role(self) -> MessageRole:
        return MessageRole.from_author(self.author)

    @property
    def has_text(self) -> bool:
        return bool(self.content and self.content.strip())


class ChatSession(BaseModel):
    """A recorded chat session as stored in the sessions collection."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Any = Field(default=None, alias="_id")
    sessionId: Any = None
    botId: Any = None
    startTime: Any = None
    endTime: Any = None
    messages: Any = None
