"""Token bucket that paces Web API requests.

Hey future me - pacing ONLY. Nothing here retries or looks at status codes; a 429 still
comes out of SpotifyApiClient as UpstreamStatusError. Each SpotifyApiClient owns its
own limiter, there's no process-wide bucket.

    limiter = RateLimiter(RateLimiterConfig(max_tokens=10, refill_rate=2.0))
    async with limiter:
        response = await client.get(url)
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class RateLimiterConfig:
    """Bucket size and refill speed.

    The defaults (burst of 10, then 2 requests/second) keep a long playlist walk
    well below the Web API's rolling limit.
    """

    max_tokens: int = 10
    refill_rate: float = 2.0  # tokens per second


@dataclass
class RateLimiter:
    """Async token bucket; one token per request."""

    config: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    name: str = "spotify"

    _tokens: float = field(default=0.0, init=False)
    _updated_at: float = field(default_factory=time.monotonic, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    def __post_init__(self) -> None:
        self._tokens = float(self.config.max_tokens)

    def _refill(self) -> None:
        now = time.monotonic()
        gained = (now - self._updated_at) * self.config.refill_rate
        self._tokens = min(float(self.config.max_tokens), self._tokens + gained)
        self._updated_at = now

    def _seconds_until_token(self) -> float:
        return (1.0 - self._tokens) / self.config.refill_rate

    async def acquire(self) -> None:
        """Take one token, sleeping until one is available."""
        # waiters queue on the lock, so tokens go out in arrival order
        async with self._lock:
            self._refill()
            while self._tokens < 1.0:
                delay = self._seconds_until_token()
                logger.debug(f"RateLimiter[{self.name}] throttling for {delay:.2f}s")
                await asyncio.sleep(delay)
                self._refill()
            self._tokens -= 1.0

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    @property
    def available_tokens(self) -> float:
        self._refill()
        return self._tokens


__all__ = ["RateLimiter", "RateLimiterConfig"]
