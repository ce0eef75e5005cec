"""
Tests for vendor administration.
"""

import pytest

from renoplan.conftest import auth_headers

HOME_DEPOT = {
    "name": "Home Depot",
    "website_url": "https://www.homedepot.com",
    "search_url_template": "https://www.homedepot.com/s/{query}",
    "priority": 10,
}


async def create_vendor(client, **overrides) -> dict:
    response = await client.post(
        "/api/vendors", json={**HOME_DEPOT, **overrides}, headers=auth_headers("admin-token")
    )
    assert response.status_code == 201
    return response.json()


class TestVendorAccess:
    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self, client):
        response = await client.get("/api/vendors", headers=auth_headers())

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_is_unauthorized(self, client):
        response = await client.post("/api/vendors", json=HOME_DEPOT)

        assert response.status_code == 401


class TestVendorRoutes:
    @pytest.mark.asyncio
    async def test_create_and_list_by_priority(self, client):
        await create_vendor(client, name="Lowe's", priority=1)
        await create_vendor(client)

        response = await client.get("/api/vendors", headers=auth_headers("admin-token"))

        assert response.json()["total"] == 2
        assert [v["name"] for v in response.json()["vendors"]] == ["Home Depot", "Lowe's"]

    @pytest.mark.asyncio
    async def test_template_must_contain_query(self, client):
        response = await client.post(
            "/api/vendors",
            json={**HOME_DEPOT, "search_url_template": "https://www.homedepot.com/s/"},
            headers=auth_headers("admin-token"),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_name_is_conflict(self, client):
        await create_vendor(client)

        response = await client.post(
            "/api/vendors", json=HOME_DEPOT, headers=auth_headers("admin-token")
        )

        assert response.status_code == 409
        assert "Home Depot" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_is_conflict(self, client):
        await create_vendor(client)
        lowes = await create_vendor(client, name="Lowe's")

        response = await client.patch(
            f"/api/vendors/{lowes['id']}",
            json={"name": "Home Depot"},
            headers=auth_headers("admin-token"),
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update(self, client):
        vendor = await create_vendor(client)

        response = await client.patch(
            f"/api/vendors/{vendor['id']}",
            json={"priority": 3, "logo_url": "https://cdn/logo.png"},
            headers=auth_headers("admin-token"),
        )

        assert response.json()["priority"] == 3
        assert response.json()["logo_url"] == "https://cdn/logo.png"
        assert response.json()["name"] == "Home Depot"

    @pytest.mark.asyncio
    async def test_toggle_flips_active(self, client):
        vendor = await create_vendor(client)
        path = f"/api/vendors/{vendor['id']}/toggle"

        first = await client.post(path, headers=auth_headers("admin-token"))
        second = await client.post(path, headers=auth_headers("admin-token"))

        assert first.json()["is_active"] is False
        assert second.json()["is_active"] is True

    @pytest.mark.asyncio
    async def test_delete(self, client):
        vendor = await create_vendor(client)

        response = await client.delete(
            f"/api/vendors/{vendor['id']}", headers=auth_headers("admin-token")
        )
        missing = await client.delete(
            f"/api/vendors/{vendor['id']}", headers=auth_headers("admin-token")
        )

        assert response.status_code == 204
        assert missing.status_code == 404
