"""Fixtures shared by the API integration tests."""

from typing import Any

import pytest
from httpx import AsyncClient

BUSINESS_DESCRIPTION = (
    "We roast speciality coffee in Bristol and sell it to cafes across the UK. "
    "Our beans are sourced directly from cooperatives in Colombia."
)


@pytest.fixture
async def business_id(authenticated_client: AsyncClient) -> str:
    """A business registered through the API."""
    response = await authenticated_client.post(
        "/api/v1/businesses",
        json={
            "name": "Bean There Coffee",
            "description": BUSINESS_DESCRIPTION,
            "industry": "Food & Beverage",
        },
    )
    assert response.status_code == 201
    return str(response.json()["data"]["id"])


@pytest.fixture
async def roadmap(authenticated_client: AsyncClient, business_id: str) -> list[dict[str, Any]]:
    """The baseline roadmap, seeded through the development reset route."""
    response = await authenticated_client.post(f"/api/v1/dev/businesses/{business_id}/reset")
    assert response.status_code == 200
    return list(response.json()["todos"])
