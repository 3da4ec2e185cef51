"""Rate limiting configuration using slowapi.

Authenticated calls are bucketed per bearer token so one owner cannot use up
another's generation budget from a shared office IP.
"""

import hashlib

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

READ_LIMIT = "30/minute"
WRITE_LIMIT = "10/minute"
# Generation and resets call the AI function.
GENERATE_LIMIT = "3/minute"


def client_key(request: Request) -> str:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        return "token:" + hashlib.sha256(token.encode()).hexdigest()[:32]
    return "ip:" + get_remote_address(request)


limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Too many requests: {limit}",
            "details": {"limit": str(limit), "path": request.url.path},
        },
    )
