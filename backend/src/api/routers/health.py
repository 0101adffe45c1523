"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.redis import get_redis_client
from db.session import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    redis: str


async def check_redis_health() -> str:
    """Return 'connected' or 'unavailable'. RedisClient.ping never raises."""
    redis_client = get_redis_client()
    if redis_client is not None and await redis_client.ping():
        return "connected"
    return "unavailable"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Check database and Redis connectivity.

    Redis only backs rate limiting, so losing it leaves the app 'healthy' (limits fail open).
    """
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        database=db_status,
        redis=await check_redis_health(),
    )
