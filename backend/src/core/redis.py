"""
Redis connection for HypeShelf's per-subject request limits.

Only the rate limiter talks to Redis. Counters live under keys of the form
`rate:<subject>:<read|write>:<min|daily>`, so each signed-in member (the identity's `sub`)
gets their own budget for posting, deleting and staff-pick toggles. Nothing else is stored
here: the recommendations board stays fully usable when Redis is down, it just stops limiting.
"""
import logging
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

# Per-minute budget. KEYS[1] is a sorted set of one subject's recent calls scored by time.
# ARGV: now, window seconds, limit, unique member id. Returns {allowed, remaining, retry_after}.
SLIDING_WINDOW_SCRIPT = """
local bucket = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])
local member = ARGV[4]

redis.call('ZREMRANGEBYSCORE', bucket, 0, now - window)
local used = redis.call('ZCARD', bucket)

if used < limit then
    redis.call('ZADD', bucket, now, now .. ':' .. member)
    redis.call('EXPIRE', bucket, window)
    return {1, limit - used - 1, 0}
end

local oldest = redis.call('ZRANGE', bucket, 0, 0, 'WITHSCORES')
local wait = 0
if oldest and oldest[2] then
    wait = math.ceil((oldest[2] + window) - now)
end
return {0, 0, wait}
"""

# Daily budget. KEYS[1] is a plain counter that expires one window after the subject's
# first call of the day. ARGV: limit, window seconds. Returns {allowed, remaining, ttl, retry_after}.
FIXED_WINDOW_SCRIPT = """
local bucket = KEYS[1]
local limit = tonumber(ARGV[1])
local window = tonumber(ARGV[2])

local used = redis.call('INCR', bucket)
if used == 1 then
    redis.call('EXPIRE', bucket, window)
end
local ttl = redis.call('TTL', bucket)

if used <= limit then
    return {1, limit - used, ttl, 0}
end
return {0, 0, ttl, ttl}
"""


class RedisClient:
    """
    Holds the pool and the preloaded limiter scripts.

    When Redis is switched off (`REDIS_ENABLED=false`) or cannot be reached at startup,
    the client stays disconnected and every call returns False / None. The limiter reads that
    as "no verdict" and lets the request through.
    """

    def __init__(self, url: str, enabled: bool = True) -> None:
        self._url = url
        self._enabled = enabled
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None
        self._sliding_window_sha: str | None = None
        self._fixed_window_sha: str | None = None

    async def connect(self) -> None:
        """Open the pool and register both limiter scripts; stay disconnected on failure."""
        if not self._enabled:
            logger.info("rate_limit_store_disabled")
            return
        try:
            self._pool = ConnectionPool.from_url(self._url, max_connections=10)
            self._client = Redis(connection_pool=self._pool)
            await self._client.ping()
            self._sliding_window_sha = await self._client.script_load(SLIDING_WINDOW_SCRIPT)
            self._fixed_window_sha = await self._client.script_load(FIXED_WINDOW_SCRIPT)
            logger.info("rate_limit_store_connected")
        except RedisError as e:
            logger.warning("rate_limit_store_unavailable", extra={"error": str(e)})
            if self._pool is not None:
                await self._pool.aclose()
            self._client = None
            self._pool = None

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            self._pool = None
            logger.info("rate_limit_store_closed")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def sliding_window_sha(self) -> str | None:
        """SHA of the per-minute script, None until connect() succeeds."""
        return self._sliding_window_sha

    @property
    def fixed_window_sha(self) -> str | None:
        """SHA of the daily script, None until connect() succeeds."""
        return self._fixed_window_sha

    async def ping(self) -> bool:
        """Used by /health to report the limiter store as up or down."""
        if not self._client:
            return False
        try:
            return await self._client.ping()
        except RedisError:
            return False

    async def evalsha(self, sha: str, numkeys: int, *args: Any) -> Any:
        """Run a preloaded limiter script; None means no verdict (disconnected or errored)."""
        if not self._client:
            return None
        try:
            return await self._client.evalsha(sha, numkeys, *args)
        except RedisError as e:
            logger.warning("rate_limit_script_failed", extra={"error": str(e)})
            return None


class _RedisState:
    client: RedisClient | None = None


_state = _RedisState()


def get_redis_client() -> RedisClient | None:
    """Client installed by the app lifespan, or None outside a running app."""
    return _state.client


def set_redis_client(client: RedisClient | None) -> None:
    _state.client = client
