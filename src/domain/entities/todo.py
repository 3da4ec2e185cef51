"""Todo domain entity and its vocabularies."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class ImpactArea(StrEnum):
    """B Corp impact areas, plus the informal ``Other`` bucket."""

    GOVERNANCE = "Governance"
    WORKERS = "Workers"
    COMMUNITY = "Community"
    ENVIRONMENT = "Environment"
    CUSTOMERS = "Customers"
    OTHER = "Other"


# The five assessment categories, in display order. ``Other`` is never part of it.
CANONICAL_IMPACT_AREAS: tuple[ImpactArea, ...] = (
    ImpactArea.GOVERNANCE,
    ImpactArea.WORKERS,
    ImpactArea.COMMUNITY,
    ImpactArea.ENVIRONMENT,
    ImpactArea.CUSTOMERS,
)


class TodoStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"


class TodoPriority(StrEnum):
    """Priority, P1 is the most urgent."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"

    @property
    def rank(self) -> int:
        """Sort key: lower ranks come first."""
        return int(self.value[1:])


class TodoEffort(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Used only when strict transitions are switched on.
STRICT_TRANSITIONS: dict[TodoStatus, frozenset[TodoStatus]] = {
    TodoStatus.TODO: frozenset({TodoStatus.IN_PROGRESS, TodoStatus.BLOCKED, TodoStatus.DONE}),
    TodoStatus.IN_PROGRESS: frozenset({TodoStatus.TODO, TodoStatus.BLOCKED, TodoStatus.DONE}),
    TodoStatus.BLOCKED: frozenset({TodoStatus.TODO, TodoStatus.IN_PROGRESS}),
    TodoStatus.DONE: frozenset({TodoStatus.TODO, TodoStatus.IN_PROGRESS}),
}


@dataclass
class Todo:
    """Domain entity for a roadmap task.

    ``user_id`` is the owning account used for tenant scoping; ``owner_user_id``
    is an optional delegate responsible for the work.
    """

    user_id: UUID
    business_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    impact: ImpactArea = ImpactArea.OTHER
    sub_area_id: UUID | None = None
    requirement_code: str | None = None
    kb_action_id: str | None = None
    description_md: str | None = None
    priority: TodoPriority = TodoPriority.P2
    effort: TodoEffort = TodoEffort.MEDIUM
    status: TodoStatus = TodoStatus.TODO
    owner_user_id: UUID | None = None
    due_date: datetime | None = None
    evidence_chunk_ids: list[str] = field(default_factory=list)
    is_impact_locked: bool = False
    anchor_quote: str | None = None
    kb_refs: list[str] = field(default_factory=list)
    rationale: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_done(self) -> bool:
        return self.status == TodoStatus.DONE

    def set_status(self, status: TodoStatus) -> None:
        """Move to ``status``, keeping ``completed_at`` in step with ``done``."""
        now = datetime.utcnow()
        if status == TodoStatus.DONE:
            if self.status != TodoStatus.DONE or self.completed_at is None:
                self.completed_at = now
        else:
            self.completed_at = None
        self.status = status
        self.updated_at = now

    def change_impact(self, impact: ImpactArea) -> None:
        """Reclassify the task.

        Moving to a different impact area drops the sub-area assignment, since
        sub-areas belong to a single impact area. The task lands in the
        unassigned bucket of its new area.
        """
        if impact != self.impact:
            self.sub_area_id = None
        self.impact = impact
        self.updated_at = datetime.utcnow()

    def soft_delete(self) -> None:
        now = datetime.utcnow()
        self.deleted_at = now
        self.updated_at = now

    def restore(self) -> None:
        self.deleted_at = None
        self.updated_at = datetime.utcnow()
