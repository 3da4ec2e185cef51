"""Business domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Business:
    """A company working through certification. Tenant root for todos and sub-areas."""

    user_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    industry: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def source_text(self) -> str:
        """Text that anchor quotes of generated tasks must be taken from."""
        return self.description or self.name
