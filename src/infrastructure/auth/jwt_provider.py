"""Bearer token verification for roadmap owners.

Production tokens are Supabase session JWTs signed with ES256; the public
keys come from the project's JWKS endpoint. Tests and local tooling mint
HS256 tokens with the shared secret from settings.

Claims read from a token:
    sub                      owner id (UUID, required)
    email                    optional
    role                     optional, usually "authenticated"
    user_metadata.*name      optional display name
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

SUPABASE_ALGORITHM = "ES256"
_DISPLAY_NAME_KEYS = ("display_name", "name", "full_name")

# kid -> JWK, shared by every provider instance in the process
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Return the signing keys published by Supabase, keyed by ``kid``.

    An empty mapping means no keys could be obtained; the failure is
    logged and the next call tries again.
    """
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            document = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("jwks_fetch_failed", jwks_url=jwks_url)
        return {}

    _jwks_cache = {key["kid"]: key for key in document.get("keys", []) if key.get("kid")}
    logger.info("jwks_fetched", key_count=len(_jwks_cache))
    return _jwks_cache


def _display_name(claims: dict[str, Any]) -> Optional[str]:
    metadata = claims.get("user_metadata") or {}
    for key in _DISPLAY_NAME_KEYS:
        if metadata.get(key):
            return metadata[key]
    return claims.get("name")


def _user_from_claims(claims: dict[str, Any]) -> Optional[TokenUser]:
    subject = claims.get("sub")
    if not subject:
        return None
    return TokenUser(
        id=UUID(subject),
        email=claims.get("email"),
        display_name=_display_name(claims),
        role=claims.get("role"),
    )


class JWTAuthProvider:
    """Resolves a bearer token to the business owner it was issued for."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the owner for a valid token.

        ``None`` covers every rejection: bad signature, expiry, an unknown
        signing key, a missing subject or a subject that is not a UUID.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg", self._algorithm) == SUPABASE_ALGORITHM:
                claims = await self._decode_supabase(token, header.get("kid"))
            else:
                claims = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
            if claims is None:
                return None
            return _user_from_claims(claims)
        except (JWTError, ValueError):
            return None

    async def _decode_supabase(self, token: str, kid: Optional[str]) -> Optional[dict]:
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if key_data is None:
            # Keys may have rotated since the cache was filled.
            key_data = (await _get_jwks_keys(refresh=True)).get(kid)
        if key_data is None:
            logger.warning("jwks_key_not_found", kid=kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm=SUPABASE_ALGORITHM),
            algorithms=[SUPABASE_ALGORITHM],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Mint an HS256 token carrying the same claims Supabase would."""
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "user_metadata": {"display_name": user.display_name},
        }
        if user.email is not None:
            claims["email"] = user.email
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
