"""
Atelier Catalog — API Route Tests
===================================

What:  HTTP status codes, camelCase bodies and the error envelope, through
       the real app with the session dependency pointed at SQLite.
"""

from unittest.mock import patch

import pytest

RING_A = {
    "name": "Ring A",
    "price": 100,
    "basic": {"slug": "ring-a"},
    "pricing": {"price": 100, "currency": "USD"},
}


async def _create(client, payload=None, **headers):
    response = await client.post("/api/products", json=payload or RING_A, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateProduct:

    @pytest.mark.asyncio
    async def test_create_returns_root_and_written_facets(self, test_client):
        body = await _create(test_client)

        product = body["product"]
        assert product["name"] == "Ring A"
        assert product["price"] == "100.00"
        assert product["rating"] == "0.00"
        assert product["reviewsCount"] == 0
        assert set(body["facets"]) == {"basic", "pricing"}
        assert body["facets"]["basic"]["slug"] == "ring-a"
        assert body["facets"]["pricing"]["priceUSD"] is None
        assert body["facets"]["pricing"]["productId"] == product["id"]

    @pytest.mark.asyncio
    async def test_duplicate_name_is_409(self, test_client):
        await _create(test_client)
        response = await test_client.post("/api/products", json=RING_A)

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert body["details"]["field"] == "name"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_invalid_field_is_400(self, test_client):
        response = await test_client.post(
            "/api/products",
            json={"name": "Ring A", "seo": {"seoTitle": "x" * 61}},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"] == {"field": "seoTitle", "facet": "seo"}

    @pytest.mark.asyncio
    async def test_huge_exponent_is_400(self, test_client):
        response = await test_client.post(
            "/api/products",
            json={"name": "Ring A", "basic": {"weight": "1e999999999"}},
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "weight"

    @pytest.mark.asyncio
    async def test_deleted_category_is_404(self, test_client, references):
        response = await test_client.post(
            "/api/products",
            json={"name": "Ring A", "basic": {"categoryId": str(references.deleted_category_id)}},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_actor_header_is_recorded(self, test_client):
        body = await _create(test_client, **{"X-Actor": "editor@atelier"})
        assert body["product"]["createdBy"] == "editor@atelier"
        assert body["facets"]["basic"]["createdBy"] == "editor@atelier"


class TestReadProduct:

    @pytest.mark.asyncio
    async def test_detail_lists_every_facet(self, test_client):
        created = await _create(test_client)
        response = await test_client.get(f"/api/products/{created['product']['id']}")

        assert response.status_code == 200
        facets = response.json()["facets"]
        assert len(facets) == 10
        assert facets["media"] is None
        assert facets["pricing"]["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_unknown_product_is_404(self, test_client):
        response = await test_client.get("/api/products/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_id_is_rejected_by_fastapi(self, test_client):
        response = await test_client.get("/api/products/not-a-uuid")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_single_facet_read(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]

        response = await test_client.get(f"/api/products/{product_id}/facets/pricing")
        assert response.status_code == 200
        assert response.json()["data"]["price"] == "100.00"

        response = await test_client.get(f"/api/products/{product_id}/facets/media")
        assert response.status_code == 200
        assert response.json() == {"facet": "media", "data": None}

        response = await test_client.get(f"/api/products/{product_id}/facets/warranty")
        assert response.status_code == 404


class TestUpdateRoutes:

    @pytest.mark.asyncio
    async def test_facet_upsert(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]

        response = await test_client.put(
            f"/api/products/{product_id}/facets/itemDetails",
            json={"trustBadges": ["Certified", "Hallmarked", "Insured", "Extra"]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["facet"] == "itemDetails"
        assert body["data"]["trustBadge1"] == '"Certified"'
        assert body["data"]["trustBadge3"] == '"Insured"'

    @pytest.mark.asyncio
    async def test_unknown_facet_is_404(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]
        response = await test_client.put(f"/api/products/{product_id}/facets/warranty", json={})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_root(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]
        response = await test_client.patch(
            f"/api/products/{product_id}",
            json={"shortDescription": "18k gold band", "rating": "5"},
        )
        assert response.status_code == 200
        assert response.json()["shortDescription"] == "18k gold band"
        assert response.json()["rating"] == "0.00"

    @pytest.mark.asyncio
    async def test_patch_price_syncs_pricing(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]
        response = await test_client.patch(f"/api/products/{product_id}", json={"price": "150"})
        assert response.status_code == 200
        assert response.json()["price"] == "150.00"

        pricing = (await test_client.get(f"/api/products/{product_id}/facets/pricing")).json()["data"]
        assert (pricing["price"], pricing["priceUSD"], pricing["currency"]) == ("150.00", "150.00", "USD")

    @pytest.mark.asyncio
    async def test_statistics_and_views(self, test_client):
        product_id = (await _create(test_client))["product"]["id"]

        response = await test_client.put(
            f"/api/products/{product_id}/statistics/rating", json={"value": 4.5}
        )
        assert response.status_code == 200
        assert response.json()["rating"] == "4.50"

        response = await test_client.put(
            f"/api/products/{product_id}/statistics/likes", json={"value": 1}
        )
        assert response.status_code == 400

        response = await test_client.post(f"/api/products/{product_id}/views")
        assert response.status_code == 200
        assert response.json()["views"] == 1


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client, db_engine):
        with patch("app.routes.health.engine", db_engine):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
