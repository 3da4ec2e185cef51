"""Validation and de-duplication of AI-generated tasks.

The generation collaborator returns loosely structured candidates. Before any
of them is persisted each one must:

* carry a title,
* quote the business description literally in ``anchor_quote``,
* cite at least one knowledge-base reference in ``kb_refs``,
* not duplicate an existing task or an earlier candidate once titles are
  normalised.

Rejected candidates are logged and dropped; they never reach the caller as
errors.
"""

import re
from collections.abc import Iterable
from typing import Any, Protocol
from uuid import UUID

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ValidationFailedError
from domain.entities.business import Business
from domain.entities.sub_area import SubArea
from domain.entities.todo import Todo
from domain.normalization import normalize_effort, normalize_impact, normalize_priority

logger = structlog.get_logger()

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class ITaskGenerator(Protocol):
    """AI task-generation collaborator."""

    async def generate(self, business: Business) -> list[dict[str, Any]]:
        """Return raw task candidates for a business.

        Raises:
            RemoteFailureError: the generator could not be reached or its
                answer could not be parsed.
        """
        ...


class GeneratedTask(BaseModel):
    """A candidate task as emitted by the generator."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description_md: str | None = Field(
        None, validation_alias=AliasChoices("description_md", "description")
    )
    impact: str = Field("Other", validation_alias=AliasChoices("impact", "impact_area"))
    priority: str = "P2"
    effort: str = "Medium"
    anchor_quote: str = Field(..., min_length=1)
    kb_refs: list[str] = Field(..., min_length=1)
    rationale: str | None = None
    requirement_code: str | None = None
    kb_action_id: str | None = None
    sub_area: str | None = None

    @field_validator("kb_refs", mode="before")
    @classmethod
    def _flatten_refs(cls, value: Any) -> Any:
        # References come back either as strings or as {"title"/"code"/"id": ...} objects.
        if not isinstance(value, list):
            return value
        refs = []
        for ref in value:
            if isinstance(ref, dict):
                ref = ref.get("title") or ref.get("code") or ref.get("id")
            if ref:
                refs.append(str(ref))
        return refs


def normalize_title(title: str) -> str:
    """Lower-case, strip punctuation and collapse whitespace."""
    stripped = _PUNCTUATION.sub("", title.lower())
    return _WHITESPACE.sub(" ", stripped).strip()


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip().casefold()


def quote_occurs_in(quote: str, source: str) -> bool:
    """Whether ``quote`` appears in ``source``, ignoring case and spacing."""
    needle = _collapse(quote)
    return bool(needle) and needle in _collapse(source)


def validate_candidate(raw: Any, source_text: str) -> GeneratedTask:
    """Parse one candidate or raise ``ValidationFailedError``."""
    if not isinstance(raw, dict):
        raise ValidationFailedError("Generated task is not an object")
    try:
        task = GeneratedTask.model_validate(raw)
    except ValidationError as exc:
        raise ValidationFailedError(
            "Generated task is missing required fields",
            details=[
                {"field": ".".join(str(x) for x in error["loc"]), "message": error["msg"]}
                for error in exc.errors()
            ],
        ) from exc
    if not quote_occurs_in(task.anchor_quote, source_text):
        raise ValidationFailedError(
            "Anchor quote does not appear in the business description",
            details={"anchor_quote": task.anchor_quote},
        )
    return task


def select_generated_tasks(
    candidates: Iterable[Any],
    business: Business,
    existing_titles: Iterable[str] = (),
) -> list[GeneratedTask]:
    """Keep the valid, non-duplicate candidates, in their original order."""
    seen = {normalize_title(title) for title in existing_titles}
    selected: list[GeneratedTask] = []
    rejected = 0

    for index, raw in enumerate(candidates):
        try:
            task = validate_candidate(raw, business.source_text)
        except ValidationFailedError as exc:
            rejected += 1
            logger.warning(
                "generated_task_rejected",
                business_id=str(business.id),
                index=index,
                reason=exc.message,
                details=exc.details,
            )
            continue

        key = normalize_title(task.title)
        if key in seen:
            rejected += 1
            logger.info(
                "generated_task_duplicate",
                business_id=str(business.id),
                title=task.title,
            )
            continue
        seen.add(key)
        selected.append(task)

    logger.info(
        "generated_tasks_selected",
        business_id=str(business.id),
        selected=len(selected),
        rejected=rejected,
    )
    return selected


def build_todo(
    task: GeneratedTask,
    business: Business,
    user_id: UUID,
    sub_areas: Iterable[SubArea] = (),
) -> Todo:
    """Turn a selected candidate into a new ``Todo``.

    A ``sub_area`` title is resolved against the business's sub-areas of the
    same impact area; unknown titles leave the task unassigned.
    """
    impact = normalize_impact(task.impact)
    sub_area_id = None
    if task.sub_area:
        wanted = task.sub_area.casefold()
        for sub_area in sub_areas:
            if sub_area.impact_area == impact and sub_area.title.casefold() == wanted:
                sub_area_id = sub_area.id
                break

    return Todo(
        user_id=user_id,
        business_id=business.id,
        title=task.title,
        description_md=task.description_md,
        impact=impact,
        priority=normalize_priority(task.priority),
        effort=normalize_effort(task.effort),
        requirement_code=task.requirement_code,
        kb_action_id=task.kb_action_id,
        anchor_quote=task.anchor_quote,
        kb_refs=list(task.kb_refs),
        rationale=task.rationale,
        sub_area_id=sub_area_id,
    )
