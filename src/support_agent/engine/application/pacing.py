"""Pacer — reveals pre-fetched answer text in small chunks at a natural pace."""

import asyncio
import random
from collections.abc import AsyncIterator, Awaitable, Callable

from support_agent.config.domain.agent import PacingConfig


class Pacer:
    """Splits text into fixed-size chunks with a jittered delay between them.

    No delay follows the last chunk. sleep and rng are injectable so tests can
    run without wall-clock waits.
    """

    def __init__(
        self,
        config: PacingConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._sleep = sleep
        self._rng = rng if rng is not None else random.Random()

    async def reveal(self, text: str) -> AsyncIterator[str]:
        size = self._config.chunk_size
        for start in range(0, len(text), size):
            yield text[start : start + size]
            if start + size < len(text):
                await self._sleep(self._next_delay_seconds())

    def _next_delay_seconds(self) -> float:
        jitter = self._rng.randint(-self._config.jitter_ms, self._config.jitter_ms)
        return max(0, self._config.base_delay_ms + jitter) / 1000
