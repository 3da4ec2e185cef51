"""Integration tests for Businesses API."""

from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from api.dependencies.auth import get_auth_provider
from api.v1.dependencies import get_business_service
from domain.services.business_service import BusinessService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from main import create_app


class TestBusinessesAPI:
    """Integration tests for Businesses API."""

    @pytest.mark.asyncio
    async def test_create_business(self, authenticated_client: AsyncClient) -> None:
        """Test POST /api/v1/businesses."""
        response = await authenticated_client.post(
            "/api/v1/businesses",
            json={"name": "Loop Bikes", "description": "Refurbished bicycles.", "industry": "Retail"},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Loop Bikes"
        assert data["industry"] == "Retail"
        assert "id" in data

    @pytest.mark.asyncio
    async def test_create_business_requires_name(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post("/api/v1/businesses", json={"name": ""})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_list_businesses(
        self, authenticated_client: AsyncClient, business_id: str
    ) -> None:
        """Test GET /api/v1/businesses."""
        response = await authenticated_client.get("/api/v1/businesses")

        assert response.status_code == 200
        body = response.json()
        assert [b["id"] for b in body["data"]] == [business_id]
        assert body["meta"]["total"] == 1

    @pytest.mark.asyncio
    async def test_get_business(self, authenticated_client: AsyncClient, business_id: str) -> None:
        response = await authenticated_client.get(f"/api/v1/businesses/{business_id}")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Bean There Coffee"

    @pytest.mark.asyncio
    async def test_get_unknown_business(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"/api/v1/businesses/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "BUSINESS_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/businesses")

        assert response.status_code == 401


class TestImpactSummaryAPI:
    """Integration tests for GET /businesses/{id}/impact-summary."""

    @pytest.mark.asyncio
    async def test_empty_roadmap_lists_every_area(
        self, authenticated_client: AsyncClient, business_id: str
    ) -> None:
        response = await authenticated_client.get(f"/api/v1/businesses/{business_id}/impact-summary")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [s["impact"] for s in data] == [
            "Governance",
            "Workers",
            "Community",
            "Environment",
            "Customers",
        ]
        assert all((s["total"], s["done"], s["pct"]) == (0, 0, 0) for s in data)

    @pytest.mark.asyncio
    async def test_tracks_completion(
        self,
        authenticated_client: AsyncClient,
        business_id: str,
        roadmap: list[dict[str, Any]],
    ) -> None:
        workers = [t for t in roadmap if t["impact"] == "Workers"]
        await authenticated_client.patch(
            f"/api/v1/todos/{workers[0]['id']}/status", json={"status": "done"}
        )

        response = await authenticated_client.get(f"/api/v1/businesses/{business_id}/impact-summary")

        by_area = {s["impact"]: s for s in response.json()["data"]}
        assert by_area["Workers"] == {"impact": "Workers", "total": 2, "done": 1, "pct": 50}
        assert by_area["Governance"]["pct"] == 0

    @pytest.mark.asyncio
    async def test_binned_tasks_are_not_counted(
        self,
        authenticated_client: AsyncClient,
        business_id: str,
        roadmap: list[dict[str, Any]],
    ) -> None:
        governance = next(t for t in roadmap if t["impact"] == "Governance")
        await authenticated_client.delete(f"/api/v1/todos/{governance['id']}")

        response = await authenticated_client.get(f"/api/v1/businesses/{business_id}/impact-summary")

        assert response.json()["data"][0]["total"] == 1


class TestBearerTokenFlow:
    """The full token path, without overriding ``get_current_user``."""

    @pytest.mark.asyncio
    async def test_owner_sees_own_businesses(
        self,
        sql_uow_factory: Callable[[], SQLAlchemyUnitOfWork],
        auth_provider: JWTAuthProvider,
        auth_headers: dict[str, str],
    ) -> None:
        app = create_app()
        app.dependency_overrides[get_auth_provider] = lambda: auth_provider
        app.dependency_overrides[get_business_service] = lambda: BusinessService(sql_uow_factory)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            created = await c.post(
                "/api/v1/businesses", json={"name": "Token Bakery"}, headers=auth_headers
            )
            listed = await c.get("/api/v1/businesses", headers=auth_headers)
            anonymous = await c.get("/api/v1/businesses")

        assert created.status_code == 201
        assert [b["name"] for b in listed.json()["data"]] == ["Token Bakery"]
        assert anonymous.status_code == 401
