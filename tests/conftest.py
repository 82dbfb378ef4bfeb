from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from starlette.datastructures import State

import main
from app.analytics.repository.access_log_repository import AccessLogRepository
from app.analytics.service.service import AnalyticsService
from app.chat.entity.chat import ChatMessage
from app.chat.repository.chat_repository import ChatHistoryRepository
from app.core.logger import get_logger
from app.llm.service.llm_service import ConversationService
from app.llm.service.provider.base_provider import BaseProvider
from pkg.db_util.mongo_conn import MongoConnection
from pkg.db_util.types import MongoConfig
from pkg.geoip_client.client import GeoIPClient


# ---------------------------------------------------------------------------
# In-memory stand-ins for the motor client
# ---------------------------------------------------------------------------


def _bson_sort_key(value: Any):
    """Order mixed types the way MongoDB does: null, numbers, strings, dates."""
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    return (4, str(value))


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs
        self._limit: Optional[int] = None

    def sort(self, key: str, direction: int):
        self._docs = sorted(self._docs, key=lambda d: _bson_sort_key(d.get(key)), reverse=direction < 0)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    async def to_list(self, length: Optional[int] = None):
        docs = self._docs
        for cap in (self._limit, length):
            if cap:
                docs = docs[:cap]
        return [dict(d) for d in docs]


class FakeCollection:
    def __init__(self):
        self.docs: List[Dict[str, Any]] = []

    async def insert_one(self, doc: Dict[str, Any]):
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return FakeInsertResult(doc["_id"])

    def find(self, query: Dict[str, Any]):
        return FakeCursor(list(self.docs))


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeMotorClient:
    def __init__(self, uri: str, database: Optional[FakeDatabase] = None, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.database = database or FakeDatabase()
        self.admin = self

    async def command(self, name: str):
        return {"ok": 1}

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.database

    def close(self):
        self.closed = True


class FakeProvider(BaseProvider):
    """Records calls and returns a canned reply or raises a canned error."""

    name = "fake"

    def __init__(self, reply: str = "Olá! Sou o TopizioBot.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[tuple[str, List[ChatMessage]]] = []

    async def complete(self, message: str, history: Sequence[ChatMessage]) -> str:
        self.calls.append((message, list(history)))
        if self.error is not None:
            raise self.error
        return self.reply


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def mongo(fake_db) -> MongoConnection:
    return MongoConnection(
        MongoConfig(uri="mongodb://localhost:27017", database="testDB"),
        client_factory=lambda uri, **kwargs: FakeMotorClient(uri, database=fake_db, **kwargs),
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def geo_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def geo_response() -> Dict[str, Any]:
    return {"status": "success", "country": "Brazil", "city": "São Paulo", "query": "200.147.67.142"}


@pytest.fixture
def geo_client(geo_requests, geo_response) -> GeoIPClient:
    def handler(request: httpx.Request) -> httpx.Response:
        geo_requests.append(request)
        return httpx.Response(200, json=geo_response)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeoIPClient(http_client, "http://ip-api.com/json")


@pytest.fixture
def client(mongo, provider, geo_client) -> TestClient:
    """TestClient with collaborators placed on app.state (lifespan is not run)."""
    main.app.state = State()
    main.app.state.logger = get_logger("tests")
    main.app.state.mongo = mongo
    main.app.state.provider = provider
    main.app.state.conversation_service = ConversationService(provider)
    main.app.state.chat_history_repository = ChatHistoryRepository(mongo, "sessoesChat")
    main.app.state.analytics_service = AnalyticsService(AccessLogRepository(mongo, "accessLogs"), geo_client)
    return TestClient(main.app, raise_server_exceptions=False)
