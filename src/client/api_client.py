"""HTTP gateway to the roadmap API."""

from typing import Any
from uuid import UUID

import httpx
import structlog

from core.exceptions import AppException, ErrorCode, RemoteFailureError
from domain.entities.impact_summary import ImpactSummary
from domain.entities.todo import ImpactArea, Todo, TodoStatus
from domain.normalization import normalize_impact, normalize_todo_record

logger = structlog.get_logger()

API_PREFIX = "/api/v1"


def _summary_from_wire(raw: dict[str, Any]) -> ImpactSummary:
    return ImpactSummary(
        impact=normalize_impact(raw["impact"]),
        total=int(raw["total"]),
        done=int(raw["done"]),
        pct=int(raw["pct"]),
    )


def _todo_from_wire(raw: dict[str, Any], user_id: UUID) -> Todo:
    # The API never echoes the owner; it is always the caller.
    return normalize_todo_record({**raw, "user_id": user_id})


class HTTPAnalysisGateway:
    """IAnalysisGateway over the REST API.

    Error bodies are turned back into ``AppException`` with the server's code
    and message. Transport failures and success bodies that cannot be read
    as the expected envelope become ``RemoteFailureError``.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        user_id: UUID,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_id = user_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HTTPAnalysisGateway":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("api_request_failed", method=method, path=path, error=str(exc))
            raise RemoteFailureError(f"Request to {path} failed: {exc}") from exc

        if response.is_error:
            raise self._error_from(response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("api_response_undecodable", method=method, path=path)
            raise RemoteFailureError(f"Response from {path} is not valid JSON") from exc

    def _error_from(self, response: httpx.Response) -> AppException:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        code = body.get("error_code")
        message = body.get("message") or f"Request failed with status {response.status_code}"
        if code in ErrorCode._value2member_map_:
            return AppException(
                error_code=ErrorCode(code),
                message=message,
                status_code=response.status_code,
                details=body.get("details"),
            )
        return RemoteFailureError(message, details={"status_code": response.status_code})

    def _field(self, body: Any, key: str = "data") -> Any:
        if not isinstance(body, dict) or key not in body:
            raise RemoteFailureError(f"Response is missing '{key}'", details={"body": body})
        return body[key]

    def _todo(self, raw: Any) -> Todo:
        try:
            return _todo_from_wire(raw, self._user_id)
        except (KeyError, TypeError, ValueError, AppException) as exc:
            raise RemoteFailureError(f"Malformed task in response: {exc}") from exc

    def _todos(self, body: Any, key: str = "data") -> list[Todo]:
        items = self._field(body, key)
        if not isinstance(items, list):
            raise RemoteFailureError(f"Response field '{key}' is not a list")
        return [self._todo(raw) for raw in items]

    def _summaries(self, body: Any, key: str = "data") -> list[ImpactSummary]:
        try:
            return [_summary_from_wire(raw) for raw in self._field(body, key)]
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteFailureError(f"Malformed impact summary in response: {exc}") from exc

    async def list_todos(self, business_id: UUID) -> list[Todo]:
        return self._todos(await self._request("GET", f"/businesses/{business_id}/todos"))

    async def list_binned_todos(self, business_id: UUID) -> list[Todo]:
        return self._todos(await self._request("GET", f"/businesses/{business_id}/todos/bin"))

    async def impact_summary(self, business_id: UUID) -> list[ImpactSummary]:
        body = await self._request("GET", f"/businesses/{business_id}/impact-summary")
        return self._summaries(body)

    async def _patch_todo(self, todo_id: UUID, action: str, payload: dict[str, Any]) -> Todo:
        body = await self._request("PATCH", f"/todos/{todo_id}/{action}", json=payload)
        return self._todo(self._field(body))

    async def update_todo_status(self, todo_id: UUID, status: TodoStatus) -> Todo:
        return await self._patch_todo(todo_id, "status", {"status": status.value})

    async def assign_task_to_sub_area(self, todo_id: UUID, sub_area_id: UUID | None) -> Todo:
        payload = {"sub_area_id": str(sub_area_id) if sub_area_id else None}
        return await self._patch_todo(todo_id, "sub-area", payload)

    async def update_task_impact_area(
        self, todo_id: UUID, impact: ImpactArea, is_locked: bool | None = None
    ) -> Todo:
        payload: dict[str, Any] = {"impact": impact.value}
        if is_locked is not None:
            payload["is_locked"] = is_locked
        return await self._patch_todo(todo_id, "impact", payload)

    async def update_task_lock_state(self, todo_id: UUID, is_locked: bool) -> Todo:
        return await self._patch_todo(todo_id, "lock", {"is_locked": is_locked})

    async def delete_task(self, todo_id: UUID) -> None:
        await self._request("DELETE", f"/todos/{todo_id}")

    async def restore_task(self, todo_id: UUID) -> None:
        await self._request("POST", f"/todos/{todo_id}/restore")

    async def generate_tasks(self, business_id: UUID) -> list[Todo]:
        return self._todos(await self._request("POST", f"/businesses/{business_id}/todos/generate"))

    async def reset_test_data(
        self, business_id: UUID
    ) -> tuple[list[Todo], list[ImpactSummary]]:
        body = await self._request("POST", f"/dev/businesses/{business_id}/reset")
        return self._todos(body, "todos"), self._summaries(body, "impact_summaries")

    async def reset_all_test_data(self, confirm: bool = False) -> int:
        body = await self._request("POST", "/dev/reset-all", json={"confirm": confirm})
        try:
            return int(self._field(body, "deleted"))
        except (TypeError, ValueError) as exc:
            raise RemoteFailureError(f"Malformed reset response: {exc}") from exc
