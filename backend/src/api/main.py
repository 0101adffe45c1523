"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from api.routers import health, recommendations, users
from core.config import get_settings
from core.exceptions import HypeShelfError
from core.rate_limit_config import RateLimitExceededError
from core.redis import RedisClient, set_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001
    """Connect Redis on startup and close it on shutdown."""
    settings = get_settings()
    redis_client = RedisClient(settings.redis_url, enabled=settings.redis_enabled)
    await redis_client.connect()
    set_redis_client(redis_client)
    yield
    set_redis_client(None)
    await redis_client.close()


class RateLimitHeadersMiddleware(BaseHTTPMiddleware):
    """Copy the rate limit info stored by check_rate_limit onto the response headers."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        info = getattr(request.state, "rate_limit_info", None)
        if info:
            response.headers["X-RateLimit-Limit"] = str(info["limit"])
            response.headers["X-RateLimit-Remaining"] = str(info["remaining"])
            response.headers["X-RateLimit-Reset"] = str(info["reset"])
        return response


async def hypeshelf_error_handler(request: Request, exc: HypeShelfError) -> JSONResponse:
    """Render domain errors as {"detail": ..., "code": ...}."""
    logger.info(
        "request_failed",
        extra={"code": exc.code, "path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def rate_limit_exceeded_handler(
    request: Request,  # noqa: ARG001
    exc: RateLimitExceededError,
) -> JSONResponse:
    """Return 429 with Retry-After and X-RateLimit-* headers."""
    result = exc.result
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Please try again later.", "code": "RATE_LIMITED"},
        headers={
            "Retry-After": str(result.retry_after),
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset),
        },
    )


def create_app() -> FastAPI:
    """Build the application with middleware, exception handlers and routers."""
    settings = get_settings()
    app = FastAPI(
        title="HypeShelf API",
        description="Community recommendations board with genre filters and staff picks.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RateLimitHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )

    app.add_exception_handler(HypeShelfError, hypeshelf_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(recommendations.router)
    return app


app = create_app()
