"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error response, documented on the routes."""

    error_code: str
    message: str
    details: Any | None = None
