from fastapi import APIRouter

from app.chat.api.dependencies import ChatHandlerDep
from app.chat.api.dto import ChatRequest, ChatResponse

chat_router = APIRouter(tags=["Chat"])


@chat_router.post("/chat", response_model=ChatResponse)
async def chat_api(body: ChatRequest, handler: ChatHandlerDep):
    """Forward the message and client-held history to the model and return its reply."""
    return await handler.chat(body)


@chat_router.get("/api/chat/historicos")
async def list_chat_histories(handler: ChatHandlerDep):
    """The 20 most recent recorded chat sessions, newest first."""
    return await handler.list_history()
