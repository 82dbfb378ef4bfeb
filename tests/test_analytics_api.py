from datetime import datetime, timezone

import httpx
import pytest
from fastapi import HTTPException

from app.analytics.api.handler import AnalyticsHandler, resolve_client_ip
from app.analytics.service.service import AnalyticsService
from app.core.logger import get_logger
from pkg.geoip_client.client import GeoIPClient

VALID_LOG = {"ip": "200.147.67.142", "city": "São Paulo", "timestamp": "2024-05-01T12:00:00.000Z"}


def access_logs(fake_db):
    return fake_db["accessLogs"].docs


@pytest.mark.parametrize("missing", ["ip", "city", "timestamp"])
def test_log_connection_missing_field_is_rejected_without_write(client, fake_db, missing):
    body = {k: v for k, v in VALID_LOG.items() if k != missing}

    resp = client.post("/api/log-connection", json=body)

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert access_logs(fake_db) == []


@pytest.mark.parametrize("field", ["ip", "city", "timestamp"])
def test_log_connection_empty_field_is_rejected_without_write(client, fake_db, field):
    body = dict(VALID_LOG, **{field: ""})

    resp = client.post("/api/log-connection", json=body)

    assert resp.status_code == 400
    assert access_logs(fake_db) == []


def test_log_connection_inserts_one_document(client, fake_db):
    call_time = datetime.now(timezone.utc)

    resp = client.post("/api/log-connection", json=VALID_LOG)

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["message"] == "Log saved"
    docs = access_logs(fake_db)
    assert len(docs) == 1
    doc = docs[0]
    assert body["logId"] == str(doc["_id"])
    assert doc["ipAddress"] == "200.147.67.142"
    assert doc["city"] == "São Paulo"
    assert doc["connectionTime"] == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert doc["createdAt"] >= call_time
    assert doc["createdAt"] != doc["connectionTime"]


def test_log_connection_accepts_epoch_millis(client, fake_db):
    resp = client.post("/api/log-connection", json=dict(VALID_LOG, timestamp=1714564800000))

    assert resp.status_code == 201
    assert access_logs(fake_db)[0]["connectionTime"] == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_repeated_log_connection_creates_distinct_rows(client, fake_db):
    first = client.post("/api/log-connection", json=VALID_LOG)
    second = client.post("/api/log-connection", json=VALID_LOG)

    assert first.status_code == second.status_code == 201
    assert first.json()["logId"] != second.json()["logId"]
    assert len(access_logs(fake_db)) == 2


def test_log_connection_database_unavailable_returns_500(client, mongo):
    from pymongo.errors import ServerSelectionTimeoutError

    class DownClient:
        def __init__(self, uri, **kwargs):
            self.admin = self

        async def command(self, name):
            raise ServerSelectionTimeoutError("no servers available")

        def close(self):
            pass

    mongo._client_factory = DownClient

    resp = client.post("/api/log-connection", json=VALID_LOG)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Error saving log."}


def test_user_info_uses_first_forwarded_address(client, geo_requests):
    resp = client.get("/api/user-info", headers={"X-Forwarded-For": "200.147.67.142, 10.0.0.1"})

    assert resp.status_code == 200
    assert resp.json() == {"ip": "200.147.67.142", "city": "São Paulo", "country": "Brazil"}
    assert len(geo_requests) == 1
    assert geo_requests[0].url.path == "/json/200.147.67.142"
    assert geo_requests[0].url.params["fields"] == "status,message,country,city,query"


def test_user_info_falls_back_to_peer_address(client, geo_requests):
    resp = client.get("/api/user-info")

    assert resp.status_code == 200
    assert geo_requests[0].url.path == "/json/testclient"


def test_user_info_lookup_failure_returns_service_message(client, geo_response):
    geo_response.clear()
    geo_response.update({"status": "fail", "message": "private range", "query": "10.0.0.1"})

    resp = client.get("/api/user-info", headers={"X-Forwarded-For": "10.0.0.1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "private range"}


@pytest.mark.parametrize(
    "forwarded, remote, expected",
    [
        ("1.1.1.1, 2.2.2.2", "3.3.3.3", "1.1.1.1"),
        (" 1.1.1.1 ", None, "1.1.1.1"),
        (None, "3.3.3.3", "3.3.3.3"),
        ("", "3.3.3.3", "3.3.3.3"),
        (None, None, None),
        ("", "", None),
    ],
)
def test_resolve_client_ip(forwarded, remote, expected):
    assert resolve_client_ip(forwarded, remote) == expected


@pytest.mark.asyncio
async def test_user_info_without_ip_makes_no_lookup():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"status": "success"})

    geo_client = GeoIPClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    analytics = AnalyticsHandler(AnalyticsService(access_log_repository=None, geo_client=geo_client), get_logger("tests"))

    with pytest.raises(HTTPException) as exc_info:
        await analytics.get_user_info(None)

    assert exc_info.value.status_code == 400
    assert calls == []
