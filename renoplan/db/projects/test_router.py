"""
Tests for the project CRUD routes.
"""

import pytest

from renoplan.conftest import auth_headers
from renoplan.db.boms.repository import BOMRepository

ITEM = {
    "category": "Flooring",
    "item_name": "Oak planks",
    "quantity": 10,
    "unit": "sqft",
    "estimated_unit_price": 4,
    "estimated_total_price": 40,
    "priority": "high",
}


async def create_project(client, token="user-token", **fields) -> dict:
    body = {"name": "Kitchen remodel", **fields}
    response = await client.post("/api/projects", json=body, headers=auth_headers(token))
    assert response.status_code == 201
    return response.json()


class TestProjectRoutes:
    @pytest.mark.asyncio
    async def test_create_defaults_to_planning(self, client):
        project = await create_project(client, budget=15000)

        assert project["status"] == "planning"
        assert project["user_id"] == "user-123"
        assert project["budget"] == 15000
        assert project["description"] == ""

    @pytest.mark.asyncio
    async def test_create_requires_name(self, client):
        response = await client.post("/api/projects", json={"name": ""}, headers=auth_headers())

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_only_returns_own_projects(self, client):
        await create_project(client)
        await create_project(client, token="other-token")

        response = await client.get("/api/projects", headers=auth_headers())

        assert response.json()["total"] == 1
        assert response.json()["projects"][0]["user_id"] == "user-123"

    @pytest.mark.asyncio
    async def test_get_other_users_project_is_404(self, client):
        project = await create_project(client, token="other-token")

        response = await client.get(f"/api/projects/{project['id']}", headers=auth_headers())

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_partial_update(self, client):
        project = await create_project(client, description="Old cabinets")

        response = await client.patch(
            f"/api/projects/{project['id']}",
            json={"status": "in_progress", "phase": "demolition"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "in_progress"
        assert updated["phase"] == "demolition"
        assert updated["description"] == "Old cabinets"

    @pytest.mark.asyncio
    async def test_update_missing_project(self, client):
        response = await client.patch(
            "/api/projects/missing", json={"name": "x"}, headers=auth_headers()
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_stats_count_by_status(self, client):
        first = await create_project(client)
        await create_project(client)
        await client.patch(
            f"/api/projects/{first['id']}", json={"status": "completed"}, headers=auth_headers()
        )
        await create_project(client, token="other-token")

        response = await client.get("/api/projects/stats", headers=auth_headers())

        assert response.json() == {
            "total": 2,
            "planning": 1,
            "in_progress": 0,
            "completed": 1,
        }

    @pytest.mark.asyncio
    async def test_delete_removes_boms_and_detaches_conversations(self, client, db_session):
        project = await create_project(client)
        conversation = (
            await client.post(
                "/api/conversations",
                json={"project_id": project["id"]},
                headers=auth_headers(),
            )
        ).json()
        boms = BOMRepository(db_session)
        bom = await boms.create_bom(project["id"], [ITEM], 40)
        await db_session.commit()

        response = await client.delete(f"/api/projects/{project['id']}", headers=auth_headers())

        assert response.status_code == 204
        assert (
            await client.get(f"/api/projects/{project['id']}", headers=auth_headers())
        ).status_code == 404
        assert (await client.get(f"/api/boms/{bom.id}", headers=auth_headers())).status_code == 404
        kept = await client.get(f"/api/conversations/{conversation['id']}", headers=auth_headers())
        assert kept.status_code == 200
        assert kept.json()["project_id"] is None

    @pytest.mark.asyncio
    async def test_delete_other_users_project_is_404(self, client):
        project = await create_project(client, token="other-token")

        response = await client.delete(f"/api/projects/{project['id']}", headers=auth_headers())

        assert response.status_code == 404


class TestProjectBOMRoutes:
    @pytest.mark.asyncio
    async def test_bom_stats(self, client, db_session):
        project = await create_project(client)
        boms = BOMRepository(db_session)
        first = await boms.create_bom(project["id"], [ITEM, {**ITEM, "item_name": "Nails"}], 80)
        await boms.create_bom(project["id"], [ITEM], 40)
        items = await boms.get_items(first.id)
        matches = await boms.add_matches(
            items[0].id,
            [
                {"vendor": "Home Depot", "product_name": "Oak", "product_url": "https://x/1"},
                {"vendor": "Lowe's", "product_name": "Oak", "product_url": "https://x/2"},
            ],
        )
        matches[0].is_selected = True
        await db_session.commit()

        response = await client.get(
            f"/api/projects/{project['id']}/bom-stats", headers=auth_headers()
        )

        assert response.json() == {
            "bom_count": 2,
            "item_count": 3,
            "shopping_list_count": 1,
            "total_estimated_cost": 120,
        }

    @pytest.mark.asyncio
    async def test_list_boms(self, client, db_session):
        project = await create_project(client)
        await BOMRepository(db_session).create_bom(project["id"], [ITEM], 40)
        await db_session.commit()

        response = await client.get(f"/api/projects/{project['id']}/boms", headers=auth_headers())

        assert response.json()["total"] == 1
        assert response.json()["boms"][0]["status"] == "draft"

    @pytest.mark.asyncio
    async def test_bom_routes_check_ownership(self, client):
        project = await create_project(client, token="other-token")

        for path in ("boms", "bom-stats"):
            response = await client.get(
                f"/api/projects/{project['id']}/{path}", headers=auth_headers()
            )
            assert response.status_code == 404
