"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The authenticated caller. ``id`` owns every business, todo and sub-area row."""

    id: UUID
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the caller for a valid bearer token, ``None`` otherwise."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for ``user``."""
        ...
