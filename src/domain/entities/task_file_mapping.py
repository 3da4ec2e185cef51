"""Task-file mapping domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class TaskFileMapping:
    """Association between a todo and an uploaded file.

    Files live in the file service; only their id is stored here.
    """

    task_id: UUID
    file_id: UUID
    id: UUID = field(default_factory=uuid4)
    mapped_by: UUID | None = None
    mapped_at: datetime = field(default_factory=datetime.utcnow)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
