"""Per-client rate limiting backed by a shared Redis sorted set."""

import logging
import math
from uuid import uuid4

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.requests import Request

from order_lookup.core.errors import RateLimitExceeded, UpstreamFailure

logger = logging.getLogger(__name__)

KEY_PREFIX = "ratelimit:order-lookup"
LOOPBACK_IP = "127.0.0.1"


def get_client_ip(request: Request) -> str:
    """Extract the client IP behind a reverse proxy.

    Uses the first entry of X-Forwarded-For, then the socket peer.
    """
    return (
        request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "")
        or LOOPBACK_IP
    )


class RateLimiter:
    """Sliding-window quota per client identity.

    Each allowed request is a member of a Redis sorted set scored by the
    store's clock. Pruning, adding and counting run in one MULTI/EXEC block,
    so concurrent workers sharing a key always see each other's requests.
    A denied request removes its own entry and does not extend the lockout.
    """

    def __init__(self, redis: aioredis.Redis, requests: int, window_seconds: int) -> None:
        self.redis = redis
        self.requests = requests
        self.window_seconds = window_seconds

    def _key(self, identity: str) -> str:
        return f"{KEY_PREFIX}:{identity}"

    async def _now(self) -> float:
        seconds, microseconds = await self.redis.time()
        return int(seconds) + int(microseconds) / 1_000_000

    async def hit(self, identity: str) -> int:
        """Count one request for ``identity``.

        Returns:
            The number of requests in the window ending now, this one included.

        Raises:
            RateLimitExceeded: If the quota for the window is used up.
            UpstreamFailure: If the store is unreachable.
        """
        key = self._key(identity)
        try:
            now = await self._now()
            member = f"{now:.6f}:{uuid4().hex}"
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(key, "-inf", now - self.window_seconds)
                pipe.zadd(key, {member: now})
                pipe.zcard(key)
                pipe.zrange(key, 0, 0, withscores=True)
                pipe.expire(key, self.window_seconds)
                _, _, count, oldest, _ = await pipe.execute()

            if count > self.requests:
                await self.redis.zrem(key, member)
        except RedisError as exc:
            logger.error("Rate limit store unavailable: %s", exc)
            raise UpstreamFailure() from exc

        if count > self.requests:
            oldest_score = oldest[0][1] if oldest else now
            retry_after = max(1, math.ceil(oldest_score + self.window_seconds - now))
            logger.info("Rate limit exceeded for %s (%d requests)", identity, count)
            raise RateLimitExceeded(headers={"Retry-After": str(retry_after)})

        return int(count)
