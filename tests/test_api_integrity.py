"""Tests for integrity API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from carddex.config import settings
from carddex.db.database import get_store
from carddex.db.store import MemoryStore
from carddex.main import app

RECORDS = {
    "collection": [
        {"card_id": "sv1-1", "variant": "normal", "quantity": 2},
        {"card_id": "sv1-1", "variant": "holofoil", "quantity": 1},
        {"card_id": "sv1-25", "variant": "reverseHolofoil", "quantity": 3},
    ],
    "wishlist": [{"card_id": "sv2-100", "is_priority": True}],
    "achievements": [
        {
            "achievement_type": "collector_milestone",
            "achievement_key": "first_card",
            "earned_at": 1767225600000,
        }
    ],
}


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
async def client(store: MemoryStore):
    """Provide an async test client with the store overridden."""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestChecksumEndpoint:
    async def test_computes_stats(self, client: AsyncClient) -> None:
        response = await client.post("/integrity/checksum", json=RECORDS)

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["checksum"], int)
        assert data["stats"] == {
            "collection_cards": 3,
            "total_quantity": 6,
            "unique_card_ids": 2,
            "wishlist_cards": 1,
            "achievements": 1,
        }
        assert data["summary"] == "6 cards, 2 unique, 1 wishlist items, 1 achievements"

    async def test_order_independent(self, client: AsyncClient) -> None:
        reordered = dict(RECORDS, collection=list(reversed(RECORDS["collection"])))

        first = await client.post("/integrity/checksum", json=RECORDS)
        second = await client.post("/integrity/checksum", json=reordered)

        assert first.json()["checksum"] == second.json()["checksum"]

    async def test_empty_body(self, client: AsyncClient) -> None:
        response = await client.post("/integrity/checksum", json={})

        assert response.status_code == 200
        assert response.json()["summary"] == "No data"

    async def test_malformed_body(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/checksum",
            json={"collection": [{"card_id": "sv1-1", "quantity": "many"}]},
        )

        assert response.status_code == 422


class TestCompareEndpoint:
    STATS = {
        "collection_cards": 3,
        "total_quantity": 6,
        "unique_card_ids": 2,
        "wishlist_cards": 1,
        "achievements": 1,
    }

    async def test_matching(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/compare",
            json={
                "local_checksum": 42,
                "server_checksum": 42,
                "local_stats": self.STATS,
                "server_stats": self.STATS,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["health"]["status"] == "healthy"
        assert data["health"]["color"] == "green"

    async def test_server_ahead(self, client: AsyncClient) -> None:
        server_stats = dict(self.STATS, collection_cards=5)

        response = await client.post(
            "/integrity/compare",
            json={
                "local_checksum": 42,
                "server_checksum": 43,
                "local_stats": self.STATS,
                "server_stats": server_stats,
            },
        )

        data = response.json()
        assert data["is_valid"] is False
        assert "Server has 2 more card entries than local" in data["discrepancies"]
        assert data["kinds"] == ["checksum", "collection_count"]
        assert data["health"]["status"] == "error"


class TestDiffEndpoint:
    async def test_reports_differences(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/diff",
            json={
                "local": [
                    {"card_id": "sv1-1", "variant": "normal", "quantity": 2},
                    {"card_id": "sv1-2", "quantity": 5},
                ],
                "server": [
                    {"card_id": "sv1-2", "variant": "normal", "quantity": 3},
                    {"card_id": "sv1-3", "variant": "holofoil", "quantity": 1},
                ],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["only_in_local"] == [{"card_id": "sv1-1", "variant": "normal", "quantity": 2}]
        assert data["only_in_server"] == [
            {"card_id": "sv1-3", "variant": "holofoil", "quantity": 1}
        ]
        assert data["quantity_differences"] == [
            {"card_id": "sv1-2", "variant": "normal", "local_quantity": 5, "server_quantity": 3}
        ]


class TestValidateEndpoint:
    async def test_valid_snapshot(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/validate",
            json={
                "version": 1,
                "createdAt": 1768564800000,
                "checksum": 1,
                "collection": [{"cardId": "sv1-1", "variant": "normal", "quantity": 2}],
            },
        )

        assert response.status_code == 200
        assert response.json()["is_valid"] is True

    async def test_invalid_card(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/validate",
            json={
                "version": 1,
                "checksum": 1,
                "collection": [{"cardId": "", "variant": "invalid", "quantity": 0}],
            },
        )

        data = response.json()
        assert data["is_valid"] is False
        assert len(data["errors"]) == 3

    async def test_non_object_is_reported_not_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/integrity/validate", json=[1, 2, 3])

        assert response.status_code == 200
        assert response.json()["errors"] == ["Invalid snapshot format"]


class TestProfileFlow:
    async def test_status_before_checkpoint(self, client: AsyncClient) -> None:
        response = await client.get("/integrity/profile-1/status")

        assert response.status_code == 200
        data = response.json()
        assert data["has_checksum"] is False
        assert data["has_snapshot"] is False
        assert data["summary"] == "No data"
        assert data["sync_status"]["urgency"] == "high"
        assert data["sync_status"]["last_sync_text"] == "Never"

    async def test_checkpoint_then_status(self, client: AsyncClient) -> None:
        checkpoint = await client.post("/integrity/profile-1/checkpoint", json=RECORDS)

        assert checkpoint.status_code == 200
        assert checkpoint.json()["snapshot_saved"] is True

        status = (await client.get("/integrity/profile-1/status")).json()
        assert status["has_checksum"] is True
        assert status["has_snapshot"] is True
        assert status["checksum"] == checkpoint.json()["checksum"]
        assert status["sync_status"]["urgency"] == "none"
        assert status["sync_status"]["last_sync_text"] == "Just now"

    async def test_verify_in_sync(self, client: AsyncClient) -> None:
        await client.post("/integrity/profile-1/checkpoint", json=RECORDS)

        response = await client.post("/integrity/profile-1/verify", json=RECORDS)

        data = response.json()
        assert data["in_sync"] is True
        assert data["health"]["status"] == "healthy"
        assert data["diff"] is None

    async def test_verify_detects_divergence(self, client: AsyncClient) -> None:
        await client.post("/integrity/profile-1/checkpoint", json=RECORDS)
        server = dict(RECORDS, collection=RECORDS["collection"][1:])

        response = await client.post("/integrity/profile-1/verify", json=server)

        data = response.json()
        assert data["in_sync"] is False
        assert data["health"]["status"] == "error"
        assert data["discrepancies"]
        assert data["diff"]["only_in_local"] == [
            {"card_id": "sv1-1", "variant": "normal", "quantity": 2}
        ]

    async def test_verify_without_checkpoint(self, client: AsyncClient) -> None:
        response = await client.post("/integrity/profile-1/verify", json=RECORDS)

        data = response.json()
        assert data["health"]["status"] == "unknown"
        assert data["local_checksum"] is None
        assert data["in_sync"] is False

    async def test_clear(self, client: AsyncClient, store: MemoryStore) -> None:
        await client.post("/integrity/profile-1/checkpoint", json=RECORDS)

        response = await client.delete("/integrity/profile-1")

        assert response.status_code == 200
        assert response.json()["cleared"] is True
        assert store.keys() == [settings.device_id_key]

        status = (await client.get("/integrity/profile-1/status")).json()
        assert status["has_checksum"] is False

    async def test_clear_unknown_profile(self, client: AsyncClient) -> None:
        response = await client.delete("/integrity/never-saved")

        assert response.status_code == 200


class TestCheckpointValidation:
    async def test_negative_quantity_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/profile-1/checkpoint",
            json={"collection": [{"card_id": "", "variant": "bogus", "quantity": -3}]},
        )

        assert response.status_code == 422

        status = (await client.get("/integrity/profile-1/status")).json()
        assert status["has_checksum"] is False
        assert status["has_snapshot"] is False

    async def test_invalid_records_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/profile-1/checkpoint",
            json={"collection": [{"card_id": "", "variant": "bogus", "quantity": 1}]},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert "card ID" in detail
        assert "variant" in detail

        status = (await client.get("/integrity/profile-1/status")).json()
        assert status["has_checksum"] is False
        assert status["has_snapshot"] is False


class TestCheckpointDevice:
    IPHONE_UA = (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
    )

    async def test_device_from_user_agent(self, client: AsyncClient) -> None:
        response = await client.post(
            "/integrity/profile-1/checkpoint",
            json=RECORDS,
            headers={"User-Agent": self.IPHONE_UA},
        )

        assert response.status_code == 200
        device = response.json()["device"]
        assert device["id"].startswith("device_")
        assert device["type"] == "ios"
        assert device["name"] == "iPhone"

    async def test_device_id_is_stable(self, client: AsyncClient, store: MemoryStore) -> None:
        first = await client.post("/integrity/profile-1/checkpoint", json=RECORDS)
        second = await client.post("/integrity/profile-2/checkpoint", json=RECORDS)

        device_id = first.json()["device"]["id"]
        assert second.json()["device"]["id"] == device_id
        assert store.get(settings.device_id_key) == device_id
