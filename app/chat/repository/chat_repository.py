# app/chat/repository/chat_repository.py

from typing import Any, List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from app.chat.entity.chat import ChatSession
from app.chat.service.service import IChatHistoryRepository, MAX_SESSIONS
from app.core.errors import NotConnectedError, UpstreamError
from app.core.logger import get_logger
from pkg.db_util.mongo_conn import MongoConnection

logger = get_logger(__name__)


def _to_jsonable(value: Any) -> Any:
    """Stringify ObjectIds anywhere in a raw session document."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


class ChatHistoryRepository(IChatHistoryRepository):
    """Reads recorded chat sessions from MongoDB."""

    def __init__(self, mongo: MongoConnection, collection_name: str = "sessoesChat"):
        self.mongo = mongo
        self.collection_name = collection_name
        self.logger = logger

    async def list_recent_sessions(self, limit: int = MAX_SESSIONS) -> List[ChatSession]:
        limit = max(1, min(limit, MAX_SESSIONS))
        try:
            collection = await self.mongo.get_collection(self.collection_name)
        except ConnectionError as e:
            raise NotConnectedError(str(e)) from e

        try:
            cursor = collection.find({}).sort("startTime", DESCENDING).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            self.logger.error(f"Failed to read chat sessions: {e}")
            raise UpstreamError(f"Failed to read chat sessions: {e}") from e

        self.logger.debug(f"Fetched {len(docs)} chat sessions")
        return [ChatSession.model_validate(_to_jsonable(doc)) for doc in docs]
