"""
Identity resolution from bearer tokens.

The frontend signs users in with the identity provider and forwards the session JWT as
``Authorization: Bearer <token>``. Tokens are verified (RS256) against the provider's JWKS.
A missing or invalid token resolves to "unauthenticated" (None); the service layer decides
whether that is acceptable for the operation.
"""
import asyncio
import logging
from functools import lru_cache

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from core.exceptions import AuthRequiredError
from schemas.identity import Identity

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ALGORITHMS = ["RS256"]


@lru_cache(maxsize=4)
def _get_jwks_client(jwks_url: str) -> jwt.PyJWKClient:
    """One JWKS client per URL so signing keys are cached across requests."""
    return jwt.PyJWKClient(jwks_url)


def decode_token(token: str, settings: Settings) -> dict:
    """
    Verify the token signature, expiry and issuer, returning its claims.

    Audience is only checked when ``auth_audience`` is configured (session tokens from
    some providers carry no ``aud`` claim).

    Raises:
        jwt.PyJWTError: If the token cannot be verified.
    """
    signing_key = _get_jwks_client(settings.auth_jwks_url).get_signing_key_from_jwt(token)
    options = {"require": ["sub", "exp"], "verify_aud": bool(settings.auth_audience)}
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=ALGORITHMS,
        issuer=settings.auth_issuer or None,
        audience=settings.auth_audience or None,
        options=options,
    )


def identity_from_claims(claims: dict) -> Identity:
    """Map verified claims to an Identity, ignoring any other fields."""
    return Identity(
        subject=str(claims["sub"]),
        name=claims.get("name") or None,
        email=claims.get("email") or None,
    )


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity | None:
    """Resolve the caller's identity, or None if unauthenticated."""
    if settings.dev_mode:
        return Identity(
            subject=settings.dev_user_subject,
            name=settings.dev_user_name,
            email=settings.dev_user_email,
        )
    if credentials is None:
        return None
    if not settings.auth_issuer:
        logger.warning("auth_not_configured", extra={"reason": "auth_issuer is empty"})
        return None
    try:
        # JWKS fetch is blocking network I/O
        claims = await asyncio.to_thread(decode_token, credentials.credentials, settings)
    except jwt.PyJWTError as e:
        logger.warning("token_verification_failed", extra={"error": str(e)})
        return None
    return identity_from_claims(claims)


async def require_identity(
    identity: Identity | None = Depends(get_identity),
) -> Identity:
    """Dependency for endpoints that need a verified caller."""
    if identity is None:
        raise AuthRequiredError()
    return identity
