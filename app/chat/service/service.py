from abc import ABC, abstractmethod
from typing import List

from app.chat.entity.chat import ChatSession

MAX_SESSIONS = 20


class IChatHistoryRepository(ABC):
    @abstractmethod
    async def list_recent_sessions(self, limit: int = MAX_SESSIONS) -> List[ChatSession]:
        """Most recent sessions, newest first, never more than MAX_SESSIONS."""
        pass
