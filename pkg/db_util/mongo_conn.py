import asyncio
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from pkg.db_util.types import MongoConfig
from pkg.log.logger import get_logger


class MongoConnection:
    """
    Process-wide MongoDB handle.

    The client is created on first use. Concurrent first callers wait on the same
    lock so only one client is ever opened; a failed attempt leaves the handle
    unset and the next caller tries again.
    """

    def __init__(
        self,
        config: MongoConfig,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
        logger=None,
    ):
        self.config = config
        self.logger = logger or get_logger(__name__)
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    async def get_database(self) -> AsyncIOMotorDatabase:
        """Return the shared database handle, connecting on first use."""
        if self._db is not None:
            return self._db

        async with self._lock:
            # Another caller may have connected while we waited on the lock
            if self._db is not None:
                return self._db

            self.logger.info("Database handle not initialized. Connecting to MongoDB...")
            client = None
            try:
                client = self._client_factory(
                    self.config.uri,
                    server_api=ServerApi("1", strict=True, deprecation_errors=True),
                    serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
                    maxPoolSize=self.config.max_pool_size,
                    appname=self.config.app_name,
                )
                await client.admin.command("ping")
            except PyMongoError as e:
                if client is not None:
                    client.close()
                self.logger.error(f"Failed to connect to MongoDB: {e}")
                raise ConnectionError(f"Could not connect to MongoDB: {e}") from e

            self._client = client
            self._db = client[self.config.database]
            self.logger.info(f"Connected to MongoDB database '{self.config.database}'.")
            return self._db

    async def get_collection(self, name: str):
        db = await self.get_database()
        return db[name]

    async def close(self) -> None:
        """Close the client if one was opened."""
        if self._client is None:
            self.logger.info("MongoDB client was not initialized, no need to close.")
            return
        self._client.close()
        self._client = None
        self._db = None
        self.logger.info("MongoDB client closed.")
