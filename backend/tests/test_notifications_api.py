"""
TeenLife Hours Backend — Notification Feed API Tests
======================================================

What:  /api/notifications endpoints, fed by real volunteer-hour activity.
"""

from unittest.mock import patch
from uuid import uuid4

import pytest

from teenlife.config import settings


async def _log_hours(client, headers, payload, count=1):
    for _ in range(count):
        response = await client.post("/api/volunteer", json=payload, headers=headers)
        assert response.status_code == 201


class TestNotificationFeed:

    @pytest.mark.asyncio
    async def test_logging_hours_creates_notification(self, test_client, auth_headers, hour_entry_data):
        headers = auth_headers("u1")
        await _log_hours(test_client, headers, hour_entry_data)

        response = await test_client.get("/api/notifications", headers=headers)

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"
        data = response.json()["data"]
        assert data["total"] == 1
        notification = data["notifications"][0]
        assert notification["title"] == "Volunteer Hours Logged"
        assert notification["category"] == "hours_logged"
        assert notification["isRead"] is False
        assert notification["actionUrl"].startswith("/volunteering/hours/")
        assert "hoursId" in notification["metadata"]

    @pytest.mark.asyncio
    async def test_paging_params(self, test_client, auth_headers, hour_entry_data):
        headers = auth_headers("u1")
        await _log_hours(test_client, headers, hour_entry_data, count=3)

        response = await test_client.get(
            "/api/notifications", params={"limit": 2, "offset": 1}, headers=headers
        )

        data = response.json()["data"]
        assert data["total"] == 3
        assert data["limit"] == 2
        assert data["offset"] == 1
        assert len(data["notifications"]) == 2

    @pytest.mark.asyncio
    async def test_limit_out_of_range_is_422(self, test_client, auth_headers):
        response = await test_client.get(
            "/api/notifications", params={"limit": 0}, headers=auth_headers("u1")
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_read_flow(self, test_client, auth_headers, hour_entry_data):
        headers = auth_headers("u1")
        await _log_hours(test_client, headers, hour_entry_data, count=2)
        listing = await test_client.get("/api/notifications", headers=headers)
        first_id = listing.json()["data"]["notifications"][0]["id"]

        response = await test_client.put(f"/api/notifications/{first_id}/read", headers=headers)
        assert response.status_code == 200

        unread = await test_client.get("/api/notifications/unread", headers=headers)
        assert unread.json()["data"] == {"count": 1}

        read_only = await test_client.get(
            "/api/notifications", params={"isRead": "true"}, headers=headers
        )
        assert [n["id"] for n in read_only.json()["data"]["notifications"]] == [first_id]

        response = await test_client.put("/api/notifications/read-all", headers=headers)
        assert response.json()["data"] == {"updated": 1}

        unread = await test_client.get("/api/notifications/unread", headers=headers)
        assert unread.json()["data"]["count"] == 0

    @pytest.mark.asyncio
    async def test_cannot_touch_other_users_notifications(self, test_client, auth_headers, hour_entry_data):
        await _log_hours(test_client, auth_headers("u1"), hour_entry_data)
        listing = await test_client.get("/api/notifications", headers=auth_headers("u1"))
        notification_id = listing.json()["data"]["notifications"][0]["id"]

        read = await test_client.put(
            f"/api/notifications/{notification_id}/read", headers=auth_headers("u2")
        )
        delete = await test_client.delete(
            f"/api/notifications/{notification_id}", headers=auth_headers("u2")
        )
        others = await test_client.get("/api/notifications", headers=auth_headers("u2"))

        assert read.status_code == 404
        assert delete.status_code == 404
        assert others.json()["data"]["total"] == 0

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_headers, hour_entry_data):
        headers = auth_headers("u1")
        await _log_hours(test_client, headers, hour_entry_data)
        listing = await test_client.get("/api/notifications", headers=headers)
        notification_id = listing.json()["data"]["notifications"][0]["id"]

        response = await test_client.delete(f"/api/notifications/{notification_id}", headers=headers)
        assert response.status_code == 200

        again = await test_client.delete(f"/api/notifications/{notification_id}", headers=headers)
        assert again.status_code == 404
        assert again.json()["message"] == "Notification not found"

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client, auth_headers):
        response = await test_client.put(
            f"/api/notifications/{uuid4()}/read", headers=auth_headers("u1")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.get("/api/notifications")
        assert response.status_code == 401


class TestTestNotificationEndpoint:

    @pytest.mark.asyncio
    async def test_available_in_development(self, test_client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "environment", "development")

        response = await test_client.post("/api/notifications/test", headers=auth_headers("u1"))

        assert response.status_code == 201
        assert response.json()["data"]["type"] == "achievement"

    @pytest.mark.asyncio
    async def test_hidden_outside_development(self, test_client, auth_headers):
        response = await test_client.post("/api/notifications/test", headers=auth_headers("u1"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_failed_insert_is_500(self, test_client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "environment", "development")

        with patch(
            "teenlife.services.notification_service.Notification",
            side_effect=RuntimeError("notification store down"),
        ):
            response = await test_client.post(
                "/api/notifications/test", headers=auth_headers("u1")
            )

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "server_error"
        assert "notification store down" not in body["message"]
