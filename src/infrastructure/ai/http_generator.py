"""Task generation through the hosted AI function.

The function answers with ``{"tasks": [...]}``. Older deployments pass the
model's raw completion through instead, sometimes wrapped in a markdown code
fence or surrounded by prose, so the payload is parsed leniently.
"""

import json
import re
from typing import Any

import httpx
import structlog

from core.config import settings
from core.exceptions import RemoteFailureError
from domain.entities.business import Business

logger = structlog.get_logger()

_FENCE_OPEN = re.compile(r"```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"```\s*$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_task_payload(text: str) -> list[dict[str, Any]]:
    """Extract the ``tasks`` list from model output.

    Tries the text as-is, then without code fences, then the outermost
    ``{...}`` block.
    """
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text.strip(), count=1)).strip()
    attempts = [text.strip(), cleaned]
    match = _JSON_OBJECT.search(cleaned)
    if match:
        attempts.append(match.group(0))

    for attempt in attempts:
        try:
            data = json.loads(attempt)
        except ValueError:
            continue
        return _tasks_from(data)

    raise RemoteFailureError("No valid JSON found in task generation response")


def _tasks_from(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get("tasks"), list):
        return [task for task in data["tasks"] if isinstance(task, dict)]
    raise RemoteFailureError(
        "Invalid task generation response: expected an object with a tasks list"
    )


class HTTPTaskGenerator:
    """ITaskGenerator backed by the ``generate-ai-tasks`` function."""

    def __init__(
        self,
        url: str = settings.task_generation_url,
        api_key: str = settings.task_generation_api_key,
        timeout: float = settings.ai_request_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def generate(self, business: Business) -> list[dict[str, Any]]:
        payload = {
            "businessId": str(business.id),
            "businessData": {
                "name": business.name,
                "industry": business.industry,
                "description": business.description,
            },
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self._url, json=payload, headers=headers, timeout=self._timeout
                )
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("task_generation_timeout", business_id=str(business.id))
            raise RemoteFailureError("Task generation timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "task_generation_failed",
                business_id=str(business.id),
                status_code=exc.response.status_code,
            )
            raise RemoteFailureError(
                "Task generation failed",
                details={"status_code": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("task_generation_unreachable", business_id=str(business.id), error=str(exc))
            raise RemoteFailureError("Task generation service unreachable") from exc

        try:
            body = response.json()
        except ValueError:
            return parse_task_payload(response.text)

        if isinstance(body, str):
            return parse_task_payload(body)
        if isinstance(body, dict) and isinstance(body.get("content"), str):
            return parse_task_payload(body["content"])
        return _tasks_from(body)
