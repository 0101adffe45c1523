"""Recommendation endpoints: public feed plus authenticated writes."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session, require_identity
from core.constants import ALL_GENRES, GENRES
from schemas.identity import Identity
from schemas.recommendation import (
    GenreListResponse,
    RecommendationCreate,
    RecommendationResponse,
)
from services import recommendation_service

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("/", response_model=list[RecommendationResponse])
async def list_recommendations(
    genre: str | None = Query(
        default=None,
        description=f"Only return this genre; '{ALL_GENRES}' or omitted returns everything",
    ),
    db: AsyncSession = Depends(get_async_session),
) -> list[RecommendationResponse]:
    """List the whole feed, newest first. Public."""
    recommendations = await recommendation_service.get_recommendations(db, genre)
    return [RecommendationResponse.model_validate(r) for r in recommendations]


@router.get("/genres", response_model=GenreListResponse)
async def list_genres() -> GenreListResponse:
    """List the genres a recommendation may be tagged with."""
    return GenreListResponse(genres=list(GENRES))


@router.post(
    "/",
    response_model=RecommendationResponse,
    status_code=201,
    dependencies=[Depends(check_rate_limit)],
)
async def add_recommendation(
    data: RecommendationCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_async_session),
) -> RecommendationResponse:
    """Add a recommendation. The caller must already be provisioned via POST /users/me."""
    recommendation = await recommendation_service.add_recommendation(db, identity, data)
    return RecommendationResponse.model_validate(recommendation)


@router.delete(
    "/{recommendation_id}",
    status_code=204,
    dependencies=[Depends(check_rate_limit)],
)
async def delete_recommendation(
    recommendation_id: int,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a recommendation. Owners can delete their own; admins can delete any."""
    await recommendation_service.delete_recommendation(db, identity, recommendation_id)


@router.post(
    "/{recommendation_id}/staff-pick",
    status_code=204,
    dependencies=[Depends(check_rate_limit)],
)
async def toggle_staff_pick(
    recommendation_id: int,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Flip the staff-pick flag on a recommendation. Admin only."""
    await recommendation_service.toggle_staff_pick(db, identity, recommendation_id)
