import logging
from typing import Any, Dict, List

from fastapi import HTTPException

from app.chat.api.dto import ChatRequest, ChatResponse
from app.chat.service.service import IChatHistoryRepository, MAX_SESSIONS
from app.core.errors import AppError, GENERIC_ERROR_MESSAGE, to_http_exception
from app.llm.service.llm_service import ConversationService


class ChatHandler:
    def __init__(
        self,
        conversation_service: ConversationService,
        history_repository: IChatHistoryRepository,
        logger: logging.Logger,
        debug: bool = False,
    ):
        self.conversation_service = conversation_service
        self.history_repository = history_repository
        self.logger = logger
        self.debug = debug

    async def chat(self, body: ChatRequest) -> ChatResponse:
        try:
            text = await self.conversation_service.complete(body.message, body.history)
            return ChatResponse(response=text)
        except AppError as e:
            self.logger.error(f"Error in /chat: {type(e).__name__}: {e.message}")
            raise to_http_exception(e, include_details=self.debug)
        except HTTPException:
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error in /chat: {e!s}", exc_info=True)
            raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    async def list_history(self) -> List[Dict[str, Any]]:
        try:
            sessions = await self.history_repository.list_recent_sessions(limit=MAX_SESSIONS)
            return [s.model_dump(mode="json", by_alias=True) for s in sessions]
        except AppError as e:
            self.logger.error(f"Error fetching chat histories: {e.message}")
            raise HTTPException(status_code=500, detail="Internal error while fetching chat histories.")
        except Exception as e:
            self.logger.error(f"Unexpected error fetching chat histories: {e!s}", exc_info=True)
            raise HTTPException(status_code=500, detail="Internal error while fetching chat histories.")
