"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    FileAlreadyMappedError,
    RemoteFailureError,
    TestDataResetDisabledError,
    TodoNotFoundError,
)


class _Body(BaseModel):
    title: str = Field(..., min_length=1)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/missing-task")
    async def _missing() -> None:
        raise TodoNotFoundError("task-1")

    @app.get("/mapped")
    async def _mapped() -> None:
        raise FileAlreadyMappedError("file-1", "task-2")

    @app.get("/remote")
    async def _remote() -> None:
        raise RemoteFailureError("Task generation timed out")

    @app.get("/reset")
    async def _reset() -> None:
        raise TestDataResetDisabledError()

    @app.get("/http")
    async def _http() -> None:
        raise HTTPException(status_code=405, detail="Method Not Allowed")

    @app.post("/validate")
    async def _validate(body: _Body) -> dict[str, bool]:
        return {"ok": True}

    return app


async def _call(method: str, path: str, **kwargs: object):  # type: ignore[no-untyped-def]
    transport = ASGITransport(app=_create_test_app())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.request(method, path, **kwargs)  # type: ignore[arg-type]


class TestAppExceptionHandler:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("path", "status", "code"),
        [
            ("/missing-task", 404, "TASK_NOT_FOUND"),
            ("/mapped", 409, "FILE_ALREADY_MAPPED"),
            ("/remote", 502, "REMOTE_FAILURE"),
            ("/reset", 403, "TEST_DATA_RESET_DISABLED"),
        ],
    )
    async def test_status_and_code(self, path: str, status: int, code: str) -> None:
        response = await _call("GET", path)

        assert response.status_code == status
        assert response.json()["error_code"] == code

    @pytest.mark.asyncio
    async def test_details_are_kept(self) -> None:
        body = (await _call("GET", "/mapped")).json()

        assert body["details"] == {"file_id": "file-1", "task_id": "task-2"}
        assert "file-1" in body["message"]


class TestFrameworkErrors:
    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        response = await _call("GET", "/http")

        assert response.status_code == 405
        assert response.json() == {
            "error_code": "HTTP_ERROR",
            "message": "Method Not Allowed",
            "details": None,
        }

    @pytest.mark.asyncio
    async def test_validation_error_names_the_field(self) -> None:
        response = await _call("POST", "/validate", json={"title": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.title"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()
        mock_request = MagicMock()
        mock_request.state.request_id = "req-42"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("database exploded"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "req-42"
