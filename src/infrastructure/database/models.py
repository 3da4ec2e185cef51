"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Partial-index predicate shared with the seeding insert's conflict target.
DEFAULT_SUB_AREA_PREDICATE = text("NOT is_user_created")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class BusinessModel(Base):
    """Business model. Owner ids come from Supabase auth."""

    __tablename__ = "businesses"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    industry: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    todos: Mapped[list["TodoModel"]] = relationship(
        "TodoModel",
        back_populates="business",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sub_areas: Mapped[list["SubAreaModel"]] = relationship(
        "SubAreaModel",
        back_populates="business",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SubAreaModel(Base):
    """Impact sub-area model.

    A default title appears at most once per business and impact area;
    user-created sub-areas may repeat titles.
    """

    __tablename__ = "impact_sub_areas"
    __table_args__ = (
        Index(
            "uq_impact_sub_areas_default_title",
            "business_id",
            "impact_area",
            "title",
            unique=True,
            postgresql_where=DEFAULT_SUB_AREA_PREDICATE,
            sqlite_where=DEFAULT_SUB_AREA_PREDICATE,
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    business_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    impact_area: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon_type: Mapped[str] = mapped_column(String(20), default="default")
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_user_created: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    business: Mapped["BusinessModel"] = relationship("BusinessModel", back_populates="sub_areas")


class TodoModel(Base):
    """Roadmap todo model.

    Enumerated columns are plain strings; legacy tokens are tolerated on read
    and normalised by the repository.
    """

    __tablename__ = "todos"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    business_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sub_area_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("impact_sub_areas.id", ondelete="SET NULL"),
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    impact: Mapped[str] = mapped_column(String(20), default="Other")
    requirement_code: Mapped[str | None] = mapped_column(String(50))
    kb_action_id: Mapped[str | None] = mapped_column(String(100))
    description_md: Mapped[str | None] = mapped_column(Text)
    priority: Mapped[str] = mapped_column(String(10), default="P2")
    effort: Mapped[str] = mapped_column(String(10), default="Medium")
    status: Mapped[str] = mapped_column(String(20), default="todo")
    owner_user_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True))
    due_date: Mapped[datetime | None] = mapped_column(DateTime)
    evidence_chunk_ids: Mapped[list[Any]] = mapped_column(JSONB, default=list)
    is_impact_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    anchor_quote: Mapped[str | None] = mapped_column(Text)
    kb_refs: Mapped[list[Any]] = mapped_column(JSONB, default=list)
    rationale: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, index=True)

    # Relationships
    business: Mapped["BusinessModel"] = relationship("BusinessModel", back_populates="todos")
    sub_area: Mapped[Optional["SubAreaModel"]] = relationship("SubAreaModel")
    file_mappings: Mapped[list["TaskFileMappingModel"]] = relationship(
        "TaskFileMappingModel",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TaskFileMappingModel(Base):
    """Task to uploaded-file association. A file maps to at most one task."""

    __tablename__ = "task_file_mappings"
    __table_args__ = (UniqueConstraint("file_id", name="uq_task_file_mappings_file"),)

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    task_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("todos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    mapped_by: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True))
    mapped_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    task: Mapped["TodoModel"] = relationship("TodoModel", back_populates="file_mappings")
