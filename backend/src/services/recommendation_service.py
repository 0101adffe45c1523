"""Service layer for recommendation CRUD and the public feed."""
import logging

from sqlalchemy import not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import ALL_GENRES, Role
from core.exceptions import NotFoundError, PermissionDeniedError
from models.recommendation import Recommendation
from schemas.identity import Identity
from schemas.recommendation import RecommendationCreate
from services.user_service import require_user
from services.validation import validate_blurb, validate_genre, validate_link, validate_title

logger = logging.getLogger(__name__)


async def add_recommendation(
    db: AsyncSession,
    identity: Identity | None,
    data: RecommendationCreate,
) -> Recommendation:
    """
    Validate and insert a new recommendation owned by the caller.

    Not idempotent: every call inserts a new row.

    Raises:
        AuthRequiredError: If the caller is unauthenticated or not provisioned.
        InvalidTitleError, InvalidBlurbError, InvalidLinkError, InvalidGenreError:
            If the corresponding field fails validation.
    """
    user = await require_user(db, identity)

    recommendation = Recommendation(
        title=validate_title(data.title),
        genre=validate_genre(data.genre),
        link=validate_link(data.link),
        blurb=validate_blurb(data.blurb),
        user_id=user.user_id,
        author_name=user.name,
        is_staff_pick=False,
    )
    db.add(recommendation)
    await db.flush()
    await db.refresh(recommendation)
    return recommendation


async def get_recommendation(db: AsyncSession, recommendation_id: int) -> Recommendation:
    """Get a recommendation by id or raise NotFoundError."""
    recommendation = await db.get(Recommendation, recommendation_id)
    if recommendation is None:
        raise NotFoundError()
    return recommendation


async def delete_recommendation(
    db: AsyncSession,
    identity: Identity | None,
    recommendation_id: int,
) -> None:
    """
    Permanently delete a recommendation.

    Allowed for the owner and for any admin.

    Raises:
        AuthRequiredError: If the caller is unauthenticated or not provisioned.
        NotFoundError: If the recommendation does not exist.
        PermissionDeniedError: If the caller is neither the owner nor an admin.
    """
    user = await require_user(db, identity)
    recommendation = await get_recommendation(db, recommendation_id)

    is_owner = recommendation.user_id == user.user_id
    if not is_owner and user.role != Role.ADMIN.value:
        logger.warning(
            "permission_denied",
            extra={
                "user_id": user.user_id,
                "operation": "delete_recommendation",
                "recommendation_id": recommendation_id,
            },
        )
        raise PermissionDeniedError()

    await db.delete(recommendation)
    await db.flush()


async def toggle_staff_pick(
    db: AsyncSession,
    identity: Identity | None,
    recommendation_id: int,
) -> bool:
    """
    Flip the staff-pick flag and return its new value. Admin only.

    The flip is a single UPDATE ... SET is_staff_pick = NOT is_staff_pick, so concurrent
    toggles never lose an update.

    Raises:
        AuthRequiredError: If the caller is unauthenticated or not provisioned.
        PermissionDeniedError: If the caller is not an admin.
        NotFoundError: If the recommendation does not exist.
    """
    user = await require_user(db, identity)
    if user.role != Role.ADMIN.value:
        logger.warning(
            "permission_denied",
            extra={
                "user_id": user.user_id,
                "operation": "toggle_staff_pick",
                "recommendation_id": recommendation_id,
            },
        )
        raise PermissionDeniedError()

    result = await db.execute(
        update(Recommendation)
        .where(Recommendation.id == recommendation_id)
        .values(is_staff_pick=not_(Recommendation.is_staff_pick))
        .returning(Recommendation.is_staff_pick),
    )
    new_value = result.scalar_one_or_none()
    if new_value is None:
        raise NotFoundError()
    return new_value


async def get_recommendations(
    db: AsyncSession,
    genre: str | None = None,
) -> list[Recommendation]:
    """
    Return the whole feed, newest first.

    ``None`` or "all" returns every recommendation; any other value returns only exact
    genre matches (an unknown genre yields an empty list). Ties on created_at are broken
    by id so the order is total.
    """
    query = select(Recommendation)
    if genre is not None and genre != ALL_GENRES:
        query = query.where(Recommendation.genre == genre)
    query = query.order_by(Recommendation.created_at.desc(), Recommendation.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())
