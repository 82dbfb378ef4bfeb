from pymongo.errors import PyMongoError

from app.analytics.entity.access_log import AccessLogEntry
from app.analytics.service.service import IAccessLogRepository
from app.core.errors import NotConnectedError, UpstreamError
from app.core.logger import get_logger
from pkg.db_util.mongo_conn import MongoConnection

logger = get_logger(__name__)


class AccessLogRepository(IAccessLogRepository):
    """Writes access log documents to MongoDB."""

    def __init__(self, mongo: MongoConnection, collection_name: str = "accessLogs"):
        self.mongo = mongo
        self.collection_name = collection_name
        self.logger = logger

    async def insert_log(self, entry: AccessLogEntry) -> str:
        try:
            collection = await self.mongo.get_collection(self.collection_name)
        except ConnectionError as e:
            raise NotConnectedError(str(e)) from e

        try:
            result = await collection.insert_one(entry.to_document())
        except PyMongoError as e:
            self.logger.error(f"Failed to insert access log: {e}")
            raise UpstreamError(f"Failed to insert access log: {e}") from e
        return str(result.inserted_id)
