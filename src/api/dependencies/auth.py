"""Bearer-token authentication for the roadmap routes."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

bearer_scheme = HTTPBearer(auto_error=False, description="Supabase session token")


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """The owner making the request. There is no anonymous access.

    The owner id is bound to the request's log context.
    """
    if credentials is None:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if user is None:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
