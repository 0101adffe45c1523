"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.auth import get_identity, require_identity
from core.config import get_settings
from core.rate_limiter import (
    RateLimitExceededError,
    RateLimitResult,
    get_operation_type,
    rate_limiter,
)
from db.session import get_async_session
from schemas.identity import Identity


async def check_rate_limit(
    request: Request,
    identity: Identity = Depends(require_identity),
) -> RateLimitResult | None:
    """
    Dependency that enforces per-user rate limits on authenticated endpoints.

    Stores result in request.state for RateLimitHeadersMiddleware.
    Raises RateLimitExceededError for 429 responses (handled by exception handler).
    """
    if not get_settings().rate_limit_enabled:
        return None

    operation_type = get_operation_type(request.method)
    result = await rate_limiter.check(identity.subject, operation_type)

    if not result.allowed:
        raise RateLimitExceededError(result)

    request.state.rate_limit_info = {
        "limit": result.limit,
        "remaining": result.remaining,
        "reset": result.reset,
    }
    return result


__all__ = [
    "check_rate_limit",
    "get_async_session",
    "get_identity",
    "get_settings",
    "require_identity",
]
