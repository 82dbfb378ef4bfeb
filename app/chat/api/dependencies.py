from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.chat.api.handler import ChatHandler
from app.core.config import settings
from app.core.errors import GENERIC_ERROR_MESSAGE


def get_chat_handler(request: Request) -> ChatHandler:
    """Get chat handler from app state."""
    if hasattr(request.app.state, "chat_handler"):
        return request.app.state.chat_handler

    state = request.app.state
    if not hasattr(state, "conversation_service") or not hasattr(state, "chat_history_repository"):
        logger = getattr(state, "logger", None)
        if logger:
            logger.error("Chat services not initialized. Check application logs.")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    chat_handler = ChatHandler(
        state.conversation_service,
        state.chat_history_repository,
        state.logger,
        debug=settings.DEBUG,
    )
    state.chat_handler = chat_handler
    return chat_handler


# Type aliases for cleaner dependency injection
ChatHandlerDep = Annotated[ChatHandler, Depends(get_chat_handler)]
