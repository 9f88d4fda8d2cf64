"""
Per-network rate limiter.

Wraps aiolimiter's leaky-bucket AsyncLimiter behind an asyncio.Lock so
waiting callers are served strictly in arrival order.
"""

import asyncio
import logging

from aiolimiter import AsyncLimiter

from src.utils.constants import DEFAULT_RATE_LIMIT, RATE_LIMIT_PERIOD_SECONDS
from src.utils.errors import InputValidationError


logger = logging.getLogger(__name__)


class NetworkRateLimiter:
    """
    Rate limiter owned by one network.

    At most `max_rate` requests are admitted per `period` seconds; callers
    beyond that suspend until a slot frees. The lock makes the queue FIFO.

    Example usage:
        limiter = NetworkRateLimiter("github", max_rate=10)
        async with limiter:
            response = await client.get(url)
    """

    def __init__(
        self,
        network: str,
        max_rate: float = DEFAULT_RATE_LIMIT,
        period: float = RATE_LIMIT_PERIOD_SECONDS,
    ) -> None:
        if max_rate <= 0:
            raise InputValidationError(f"max_rate must be positive, got: {max_rate}")
        if period <= 0:
            raise InputValidationError(f"period must be positive, got: {period}")

        self.network = network
        self.max_rate = max_rate
        self.period = period
        self.total_acquired = 0
        self._limiter = AsyncLimiter(max_rate, period)
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Suspend until a request slot is available."""
        async with self._lock:
            if not self._limiter.has_capacity():
                logger.debug("Rate limit reached for %s, waiting for a slot", self.network)
            await self._limiter.acquire()
            self.total_acquired += 1

    async def __aenter__(self) -> "NetworkRateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def __repr__(self) -> str:
        return f"NetworkRateLimiter(network={self.network!r}, max_rate={self.max_rate}, period={self.period})"
