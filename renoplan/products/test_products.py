"""
Tests for vendor product search.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from renoplan.ai.gateway.exceptions import GatewayRateLimitError
from renoplan.conftest import auth_headers
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.projects.repository import ProjectRepository
from renoplan.db.vendors.repository import VendorRepository
from renoplan.integrations.firecrawl.dependencies import get_firecrawl_client
from renoplan.integrations.firecrawl.exceptions import FirecrawlServerError
from renoplan.integrations.firecrawl.schemas import ScrapeResult
from renoplan.products.constants import MAX_CONTENT_CHARS, NO_PRODUCTS_MESSAGE
from renoplan.products.service import build_extraction_messages, encode_query

FAUCET = {
    "category": "Plumbing",
    "item_name": "Kitchen faucet",
    "description": None,
    "quantity": 1,
    "unit": "each",
    "estimated_unit_price": 150,
    "estimated_total_price": 150,
    "priority": "high",
}


class FakeFirecrawl:
    def __init__(self):
        self.scrape = AsyncMock(
            return_value=ScrapeResult(markdown="# Results", html="<h1>Results</h1>")
        )


@pytest.fixture
def firecrawl(app) -> FakeFirecrawl:
    fake = FakeFirecrawl()
    app.dependency_overrides[get_firecrawl_client] = lambda: fake
    return fake


@pytest_asyncio.fixture
async def item(db_session):
    project = await ProjectRepository(db_session).create_project("user-123", "Kitchen")
    boms = BOMRepository(db_session)
    bom = await boms.create_bom(project.id, [FAUCET], 150)
    (faucet,) = await boms.get_items(bom.id)
    await db_session.commit()
    return faucet


async def add_vendor(db_session, name, priority=0, is_active=True):
    await VendorRepository(db_session).create_vendor(
        name=name,
        website_url=f"https://{name.lower()}.test",
        search_url_template=f"https://{name.lower()}.test/search?q={{query}}",
        priority=priority,
        is_active=is_active,
    )
    await db_session.commit()


def search_body(item_id, **extra):
    return {"bomItemId": item_id, "searchQuery": "chrome faucet & sprayer", **extra}


def test_encode_query_matches_encode_uri_component():
    assert encode_query("chrome faucet & sprayer") == "chrome%20faucet%20%26%20sprayer"
    assert encode_query("it's (new)!") == "it's%20(new)!"
    assert encode_query("ușă") == "u%C8%99%C4%83"


class TestExtractionMessages:
    def test_truncates_content(self):
        from renoplan.db.boms.model import BOMItem

        item = BOMItem(**FAUCET)
        messages = build_extraction_messages(item, "Acme", "x" * 10000, "en")

        assert "Target item: Kitchen faucet" in messages[0]["content"]
        assert "Description: N/A" in messages[0]["content"]
        scraped = messages[1]["content"].split("\n\n", 1)[1]
        assert scraped == "x" * MAX_CONTENT_CHARS

    def test_romanian_and_unknown_languages(self):
        from renoplan.db.boms.model import BOMItem

        item = BOMItem(**FAUCET)

        assert "Articol căutat" in build_extraction_messages(item, "Acme", "", "ro")[0]["content"]
        assert "Target item" in build_extraction_messages(item, "Acme", "", "de")[0]["content"]


class TestSearchRoute:
    @pytest.mark.asyncio
    async def test_stores_matches_from_every_vendor(
        self, client, gateway, firecrawl, item, db_session
    ):
        await add_vendor(db_session, "Lowes", priority=1)
        await add_vendor(db_session, "Depot", priority=5)
        await add_vendor(db_session, "Closed", is_active=False)
        gateway.call_function.side_effect = [
            {"products": [{"product_name": "Chrome faucet", "price": 99, "match_score": 90}]},
            {
                "products": [
                    {
                        "product_name": "Pull-down faucet",
                        "price": 120,
                        "product_url": "https://lowes.test/p/1",
                        "in_stock": False,
                    },
                    {"price": 5},
                ]
            },
        ]

        response = await client.post(
            "/api/products/search", json=search_body(item.id), headers=auth_headers()
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["matchCount"] == 2
        scraped = [c.args[0].url for c in firecrawl.scrape.call_args_list]
        assert scraped == [
            "https://depot.test/search?q=chrome%20faucet%20%26%20sprayer",
            "https://lowes.test/search?q=chrome%20faucet%20%26%20sprayer",
        ]
        depot, lowes = data["matches"]
        assert depot["product_url"] == scraped[0]
        assert depot["is_selected"] is False
        assert lowes["in_stock"] is False
        assert lowes["match_score"] == 50

        stored = await client.get(f"/api/boms/items/{item.id}/matches", headers=auth_headers())
        assert stored.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_failing_vendor_is_skipped(self, client, gateway, firecrawl, item, db_session):
        await add_vendor(db_session, "Depot", priority=5)
        await add_vendor(db_session, "Lowes", priority=1)
        firecrawl.scrape.side_effect = [
            FirecrawlServerError(),
            ScrapeResult(markdown="# Lowes"),
        ]
        gateway.call_function.return_value = {
            "products": [{"product_name": "Faucet", "price": 80, "match_score": 70}]
        }

        response = await client.post(
            "/api/products/search", json=search_body(item.id), headers=auth_headers()
        )

        assert response.json()["matchCount"] == 1
        assert response.json()["matches"][0]["vendor"] == "Lowes"

    @pytest.mark.asyncio
    async def test_nothing_found(self, client, gateway, firecrawl, item, db_session):
        await add_vendor(db_session, "Depot")
        gateway.call_function.side_effect = GatewayRateLimitError()

        response = await client.post(
            "/api/products/search", json=search_body(item.id), headers=auth_headers()
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "matchCount": 0,
            "matches": [],
            "message": NO_PRODUCTS_MESSAGE,
        }

    @pytest.mark.asyncio
    async def test_no_active_vendors(self, client, firecrawl, item):
        response = await client.post(
            "/api/products/search", json=search_body(item.id), headers=auth_headers()
        )

        assert response.json() == {
            "success": False,
            "matchCount": 0,
            "matches": [],
            "error": "No active vendors configured",
        }
        firecrawl.scrape.assert_not_called()

    @pytest.mark.asyncio
    async def test_vendor_filter(self, client, gateway, firecrawl, item, db_session):
        await add_vendor(db_session, "Depot")
        await add_vendor(db_session, "Lowes")
        gateway.call_function.return_value = {"products": []}

        await client.post(
            "/api/products/search",
            json=search_body(item.id, vendors=["Lowes"]),
            headers=auth_headers(),
        )

        assert firecrawl.scrape.call_count == 1
        assert firecrawl.scrape.call_args.args[0].url.startswith("https://lowes.test")

    @pytest.mark.asyncio
    async def test_item_of_another_user(self, client, firecrawl, item):
        response = await client.post(
            "/api/products/search",
            json=search_body(item.id),
            headers=auth_headers("other-token"),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "BOM item not found"}
