"""
Tabrik Backend — HTTP Endpoint Tests
======================================

What:  End-to-end tests of every route through the ASGI app.
How:   HTTPX AsyncClient with ASGITransport; the connector dependency is
       overridden with an in-memory store (test_client) or a degraded-mode
       connector (offline_client).
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import PyMongoError

MISSING_ID = "507f1f77bcf86cd799439011"

ORDER = {
    "ism": "Dilnoza",
    "yosh": 25,
    "tugilgan_sana": "1999-03-08",
    "telefon": "+998901234567",
    "tabriklovchilar": "Oila a'zolari",
    "asosiy": "Tug'ilgan kun bilan!",
    "murojaat": "Toshkent",
    "qoshiq": "Onajon",
    "buyurtmachi_telefon": "+998907654321",
}


class TestOrders:

    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client):
        response = await test_client.post("/api/orders", json=ORDER)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "✅ Buyurtma qabul qilindi"
        assert body["order"]["id"]
        assert body["order"]["createdAt"]

        listed = (await test_client.get("/api/orders")).json()
        assert len(listed) == 1
        assert listed[0]["id"] == body["order"]["id"]
        assert listed[0]["ism"] == "Dilnoza"
        assert listed[0]["yosh"] == 25
        assert listed[0]["qoshiq"] == "Onajon"

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client):
        for name in ("A", "B", "C"):
            await test_client.post("/api/orders", json={"ism": name})

        listed = (await test_client.get("/api/orders")).json()

        assert [o["ism"] for o in listed] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_delete(self, test_client):
        created = (await test_client.post("/api/orders", json={"ism": "Ali"})).json()

        response = await test_client.delete(f"/api/orders/{created['order']['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "🗑️ Buyurtma o'chirildi"}
        assert (await test_client.get("/api/orders")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_id_succeeds(self, test_client):
        response = await test_client.delete(f"/api/orders/{MISSING_ID}")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, test_client):
        response = await test_client.delete("/api/orders/abc")

        assert response.status_code == 500
        assert "abc" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_insert_failure_returns_500(self, test_client, fake_db):
        fake_db["orders"].insert_one = AsyncMock(side_effect=PyMongoError("disk full"))

        response = await test_client.post("/api/orders", json={"ism": "Ali"})

        assert response.status_code == 500
        assert response.json()["error"] == "disk full"


class TestOrdersOffline:

    @pytest.mark.asyncio
    async def test_create_echoes_body(self, offline_client):
        response = await offline_client.post("/api/orders", json={"ism": "Ali", "yosh": 30})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "✅ Buyurtma qabul qilindi (test rejimi)"
        assert body["order"] == {"ism": "Ali", "yosh": 30}

    @pytest.mark.asyncio
    async def test_create_echoes_unknown_fields_and_raw_types(self, offline_client):
        submitted = {"ism": "Ali", "yosh": "25", "sovga": "gul"}

        response = await offline_client.post("/api/orders", json=submitted)

        assert response.status_code == 200
        assert response.json()["order"] == submitted

    @pytest.mark.asyncio
    async def test_list_is_empty(self, offline_client):
        await offline_client.post("/api/orders", json={"ism": "Ali"})

        response = await offline_client.get("/api/orders")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_delete_fails(self, offline_client):
        response = await offline_client.delete(f"/api/orders/{MISSING_ID}")

        assert response.status_code == 500
        assert response.json()["error"] == "Database is not connected"


class TestMedia:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, test_client):
        created = await test_client.post(
            "/api/media", json={"text": "Salom", "audioUrl": "https://cdn/a.mp3"}
        )
        assert created.status_code == 200
        media = created.json()["media"]
        assert created.json()["message"] == "✅ Media qo'shildi"

        updated = await test_client.put(f"/api/media/{media['id']}", json={"text": "Xayr"})
        assert updated.status_code == 200
        assert updated.json()["message"] == "✏️ Media yangilandi"
        assert updated.json()["media"]["id"] == media["id"]
        assert updated.json()["media"]["text"] == "Xayr"
        assert updated.json()["media"]["audioUrl"] == "https://cdn/a.mp3"

        deleted = await test_client.delete(f"/api/media/{media['id']}")
        assert deleted.json() == {"message": "🗑️ Media o'chirildi"}
        assert (await test_client.get("/api/media")).json() == []

    @pytest.mark.asyncio
    async def test_update_missing_id_returns_null(self, test_client):
        response = await test_client.put(f"/api/media/{MISSING_ID}", json={"text": "x"})

        assert response.status_code == 200
        assert response.json()["media"] is None

    @pytest.mark.asyncio
    async def test_update_malformed_id(self, test_client):
        response = await test_client.put("/api/media/123", json={"text": "x"})

        assert response.status_code == 500
        assert "123" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_list_store_error_is_empty(self, test_client, fake_db):
        await test_client.post("/api/media", json={"text": "a"})
        fake_db["media"].find = MagicMock(side_effect=PyMongoError("boom"))

        response = await test_client.get("/api/media")

        assert response.status_code == 200
        assert response.json() == []


class TestMediaOffline:

    @pytest.mark.asyncio
    async def test_create_echoes_body(self, offline_client):
        response = await offline_client.post("/api/media", json={"text": "Salom"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "✅ Media qo'shildi (test rejimi)",
            "media": {"text": "Salom"},
        }

    @pytest.mark.asyncio
    async def test_list_is_empty(self, offline_client):
        assert (await offline_client.get("/api/media")).json() == []

    @pytest.mark.asyncio
    async def test_update_and_delete_fail(self, offline_client):
        updated = await offline_client.put(f"/api/media/{MISSING_ID}", json={"text": "x"})
        deleted = await offline_client.delete(f"/api/media/{MISSING_ID}")

        assert updated.status_code == 500
        assert deleted.status_code == 500
        assert deleted.json()["error"] == "Database is not connected"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["mongodb"] == "connected"
        assert body["message"] == "Database connected"
        assert body["env"] == "test"
        assert body["timestamp"]

    @pytest.mark.asyncio
    async def test_health_disconnected(self, offline_client):
        response = await offline_client.get("/health")

        assert response.status_code == 200
        assert response.json()["mongodb"] == "disconnected"
        assert response.json()["message"] == "Running without database (test mode)"


class TestFrontendAndMiddleware:

    @pytest.mark.asyncio
    async def test_root_serves_index(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert "tabrik-test-page" in response.text

    @pytest.mark.asyncio
    async def test_static_asset(self, test_client):
        response = await test_client.get("/app.js")

        assert response.status_code == 200
        assert "tabrik" in response.text

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/api/orders", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_cors_any_origin(self, test_client):
        response = await test_client.get("/api/media", headers={"Origin": "https://example.uz"})
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_access_log_names_collection_and_database_state(self, offline_client, caplog):
        with caplog.at_level(logging.INFO, logger="tabrik.access"):
            await offline_client.delete(f"/api/orders/{MISSING_ID}", headers={"X-Request-ID": "r1"})

        record = next(r for r in caplog.records if r.name == "tabrik.access")
        assert record.levelno == logging.ERROR
        assert record.collection == "orders"
        assert record.mongodb == "disconnected"
        assert record.status == 500
        assert record.request_id == "r1"

    @pytest.mark.asyncio
    async def test_health_is_not_access_logged(self, test_client, caplog):
        with caplog.at_level(logging.DEBUG, logger="tabrik.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "tabrik.access"]
