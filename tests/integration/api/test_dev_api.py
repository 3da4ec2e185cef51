"""Integration tests for the development reset routes."""

from typing import Any
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from api.dependencies.auth import get_current_user
from infrastructure.auth.provider import TokenUser
from main import create_app


class TestResetTestDataAPI:
    """Integration tests for POST /dev/businesses/{id}/reset."""

    @pytest.mark.asyncio
    async def test_reset_returns_baseline(
        self, authenticated_client: AsyncClient, business_id: str
    ) -> None:
        response = await authenticated_client.post(f"/api/v1/dev/businesses/{business_id}/reset")

        assert response.status_code == 200
        body = response.json()
        assert len(body["todos"]) == 10
        assert [s["total"] for s in body["impact_summaries"]] == [2, 2, 2, 2, 2]
        assert all(t["status"] == "todo" for t in body["todos"])

    @pytest.mark.asyncio
    async def test_reset_discards_progress(
        self,
        authenticated_client: AsyncClient,
        business_id: str,
        roadmap: list[dict[str, Any]],
    ) -> None:
        await authenticated_client.patch(
            f"/api/v1/todos/{roadmap[0]['id']}/status", json={"status": "done"}
        )
        await authenticated_client.delete(f"/api/v1/todos/{roadmap[1]['id']}")

        response = await authenticated_client.post(f"/api/v1/dev/businesses/{business_id}/reset")

        assert all(s["done"] == 0 for s in response.json()["impact_summaries"])
        binned = await authenticated_client.get(f"/api/v1/businesses/{business_id}/todos/bin")
        assert binned.json()["data"] == []
        old = await authenticated_client.get(f"/api/v1/todos/{roadmap[0]['id']}")
        assert old.status_code == 404

    @pytest.mark.asyncio
    async def test_reset_seeds_sub_areas(
        self, authenticated_client: AsyncClient, business_id: str, roadmap: list[dict[str, Any]]
    ) -> None:
        listing = await authenticated_client.get(f"/api/v1/businesses/{business_id}/sub-areas")

        sub_area_ids = {s["id"] for s in listing.json()["data"]}
        assert len(sub_area_ids) == 19
        assert all(t["sub_area_id"] in sub_area_ids for t in roadmap)

    @pytest.mark.asyncio
    async def test_reset_unknown_business(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(f"/api/v1/dev/businesses/{uuid4()}/reset")

        assert response.status_code == 404


class TestResetAllTestDataAPI:
    """Integration tests for POST /dev/reset-all."""

    @pytest.mark.asyncio
    async def test_requires_confirmation(
        self, authenticated_client: AsyncClient, roadmap: list[dict[str, Any]]
    ) -> None:
        response = await authenticated_client.post("/api/v1/dev/reset-all", json={})

        assert response.status_code == 400
        assert response.json()["error_code"] == "CONFIRMATION_REQUIRED"

    @pytest.mark.asyncio
    async def test_deletes_every_task(
        self,
        authenticated_client: AsyncClient,
        business_id: str,
        roadmap: list[dict[str, Any]],
    ) -> None:
        file_id = str(uuid4())
        await authenticated_client.post(
            f"/api/v1/todos/{roadmap[0]['id']}/files", json={"file_ids": [file_id]}
        )

        response = await authenticated_client.post(
            "/api/v1/dev/reset-all", json={"confirm": True}
        )

        assert response.json() == {"deleted": 10}
        todos = await authenticated_client.get(f"/api/v1/businesses/{business_id}/todos")
        assert todos.json()["data"] == []
        tasks = await authenticated_client.get(f"/api/v1/files/{file_id}/todos")
        assert tasks.json()["data"] == []


class TestDevRoutesDisabled:
    @pytest.mark.asyncio
    async def test_routes_are_not_mounted(self, test_user: TokenUser) -> None:
        app = create_app(enable_test_data_reset=False)
        app.dependency_overrides[get_current_user] = lambda: test_user

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.post("/api/v1/dev/reset-all", json={"confirm": True})

        assert response.status_code == 404
