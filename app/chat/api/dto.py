from pydantic import BaseModel, Field
from typing import List, Optional

from app.chat.entity.chat import ChatMessage


class ChatRequest(BaseModel):
    # Optional so a missing message is reported as a 400, not a schema error
    message: Optional[str] = None
    history: Optional[List[ChatMessage]] = Field(default=None)


class ChatResponse(BaseModel):
    response: str
