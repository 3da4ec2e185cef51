"""Normalisation of persisted todo values into the canonical vocabularies.

Rows written by older clients and by the AI functions use legacy tokens
(``high``/``medium``/``low`` priorities, lower-case impact areas,
``not_started`` statuses). Every value read from storage passes through the
mapping functions below before business logic sees it.

Each function is total: known legacy tokens map to their canonical value,
canonical values pass through unchanged, and anything else falls back to a
fixed default. Fallbacks are logged so a defaulted value can always be traced
back to the raw input.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeVar
from uuid import UUID

import structlog

from core.exceptions import ValidationFailedError
from domain.entities.todo import ImpactArea, Todo, TodoEffort, TodoPriority, TodoStatus

logger = structlog.get_logger()

E = TypeVar("E", bound=StrEnum)

IMPACT_ALIASES: dict[str, ImpactArea] = {
    "governance": ImpactArea.GOVERNANCE,
    "workers": ImpactArea.WORKERS,
    "community": ImpactArea.COMMUNITY,
    "environment": ImpactArea.ENVIRONMENT,
    "customers": ImpactArea.CUSTOMERS,
    "other": ImpactArea.OTHER,
}

PRIORITY_ALIASES: dict[str, TodoPriority] = {
    "high": TodoPriority.P1,
    "medium": TodoPriority.P2,
    "low": TodoPriority.P3,
    "p1": TodoPriority.P1,
    "p2": TodoPriority.P2,
    "p3": TodoPriority.P3,
}

EFFORT_ALIASES: dict[str, TodoEffort] = {
    "low": TodoEffort.LOW,
    "medium": TodoEffort.MEDIUM,
    "high": TodoEffort.HIGH,
}

STATUS_ALIASES: dict[str, TodoStatus] = {
    "not_started": TodoStatus.TODO,
    "todo": TodoStatus.TODO,
    "in_progress": TodoStatus.IN_PROGRESS,
    "in-progress": TodoStatus.IN_PROGRESS,
    "in progress": TodoStatus.IN_PROGRESS,
    "blocked": TodoStatus.BLOCKED,
    "done": TodoStatus.DONE,
    "completed": TodoStatus.DONE,
}


def _normalize(
    field_name: str,
    raw: Any,
    enum_cls: type[E],
    aliases: Mapping[str, E],
    default: E,
) -> E:
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        if raw in enum_cls._value2member_map_:
            return enum_cls(raw)
        alias = aliases.get(raw.strip().lower())
        if alias is not None:
            return alias
    logger.warning(
        "todo_field_defaulted",
        field=field_name,
        raw_value=raw,
        default=default.value,
    )
    return default


def normalize_impact(raw: Any) -> ImpactArea:
    return _normalize("impact", raw, ImpactArea, IMPACT_ALIASES, ImpactArea.OTHER)


def normalize_priority(raw: Any) -> TodoPriority:
    return _normalize("priority", raw, TodoPriority, PRIORITY_ALIASES, TodoPriority.P2)


def normalize_effort(raw: Any) -> TodoEffort:
    return _normalize("effort", raw, TodoEffort, EFFORT_ALIASES, TodoEffort.MEDIUM)


def normalize_status(raw: Any) -> TodoStatus:
    return _normalize("status", raw, TodoStatus, STATUS_ALIASES, TodoStatus.TODO)


def _as_uuid(value: Any) -> UUID | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, UUID) else UUID(str(value))


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


REQUIRED_TODO_FIELDS = ("id", "user_id", "business_id", "title", "created_at")


def normalize_todo_record(raw: Mapping[str, Any]) -> Todo:
    """Build a canonical ``Todo`` from a snake_case storage or wire record.

    The result depends only on ``raw``: identity and timestamps are never
    invented, so a record missing any of ``REQUIRED_TODO_FIELDS`` is rejected.
    ``updated_at`` defaults to ``created_at``. ``completed_at`` is dropped for
    anything that is not ``done``, and a ``done`` row without one borrows its
    last update time, so rows written before the invariant was enforced read
    back consistently.
    """
    missing = [key for key in REQUIRED_TODO_FIELDS if raw.get(key) in (None, "")]
    if missing:
        raise ValidationFailedError(
            "Todo record is missing required fields", details={"missing": missing}
        )

    created_at = _as_datetime(raw["created_at"])
    updated_at = _as_datetime(raw.get("updated_at")) or created_at
    status = normalize_status(raw.get("status"))
    completed_at = None
    if status == TodoStatus.DONE:
        completed_at = _as_datetime(raw.get("completed_at")) or updated_at

    return Todo(
        id=_as_uuid(raw["id"]),  # type: ignore[arg-type]
        user_id=_as_uuid(raw["user_id"]),  # type: ignore[arg-type]
        business_id=_as_uuid(raw["business_id"]),  # type: ignore[arg-type]
        title=raw["title"],
        impact=normalize_impact(raw.get("impact")),
        sub_area_id=_as_uuid(raw.get("sub_area_id")),
        requirement_code=raw.get("requirement_code"),
        kb_action_id=raw.get("kb_action_id"),
        description_md=raw.get("description_md"),
        priority=normalize_priority(raw.get("priority")),
        effort=normalize_effort(raw.get("effort")),
        status=status,
        owner_user_id=_as_uuid(raw.get("owner_user_id")),
        due_date=_as_datetime(raw.get("due_date")),
        evidence_chunk_ids=list(raw.get("evidence_chunk_ids") or []),
        is_impact_locked=bool(raw.get("is_impact_locked") or False),
        anchor_quote=raw.get("anchor_quote"),
        kb_refs=[str(ref) for ref in raw.get("kb_refs") or []],
        rationale=raw.get("rationale"),
        created_at=created_at,  # type: ignore[arg-type]
        updated_at=updated_at,  # type: ignore[arg-type]
        completed_at=completed_at,
        deleted_at=_as_datetime(raw.get("deleted_at")),
    )
