"""User directory endpoints for the calling user."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session, get_identity, require_identity
from schemas.identity import Identity
from schemas.user import IsAdminResponse, UserResponse
from services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/me",
    response_model=UserResponse,
    dependencies=[Depends(check_rate_limit)],
)
async def create_or_get_user(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_async_session),
) -> UserResponse:
    """
    Provision the caller on first sign-in, or return the existing user unchanged.

    The first user ever provisioned becomes the admin.
    """
    user = await user_service.get_or_create_user(db, identity)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse | None)
async def get_current_user(
    identity: Identity | None = Depends(get_identity),
    db: AsyncSession = Depends(get_async_session),
) -> UserResponse | None:
    """Get the caller's user, or null if signed out or not yet provisioned."""
    user = await user_service.get_current_user(db, identity)
    if user is None:
        return None
    return UserResponse.model_validate(user)


@router.get("/me/is-admin", response_model=IsAdminResponse)
async def is_admin(
    identity: Identity | None = Depends(get_identity),
    db: AsyncSession = Depends(get_async_session),
) -> IsAdminResponse:
    """Check whether the caller holds the admin role."""
    return IsAdminResponse(is_admin=await user_service.is_admin(db, identity))
