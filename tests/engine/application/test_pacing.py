"""Tests for the Pacer reveal decorator."""

import random

from support_agent.config.domain.agent import PacingConfig
from support_agent.engine.application.pacing import Pacer


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


async def _reveal(pacer: Pacer, text: str) -> list[str]:
    return [chunk async for chunk in pacer.reveal(text)]


class TestReveal:
    async def test_text_is_split_into_fixed_chunks(self) -> None:
        pacer = Pacer(PacingConfig(), sleep=_RecordingSleep(), rng=random.Random(1))

        assert await _reveal(pacer, "abcdefghij") == ["abcd", "efgh", "ij"]

    async def test_no_delay_after_the_last_chunk(self) -> None:
        sleep = _RecordingSleep()
        pacer = Pacer(PacingConfig(), sleep=sleep, rng=random.Random(1))

        await _reveal(pacer, "abcdefghij")

        assert len(sleep.delays) == 2

    async def test_delays_stay_within_jitter_bounds(self) -> None:
        sleep = _RecordingSleep()
        pacer = Pacer(PacingConfig(), sleep=sleep, rng=random.Random(3))

        await _reveal(pacer, "x" * 400)

        assert all(0.013 <= d <= 0.023 for d in sleep.delays)

    async def test_zero_jitter_gives_the_base_delay(self) -> None:
        sleep = _RecordingSleep()
        pacer = Pacer(PacingConfig(jitter_ms=0, base_delay_ms=18), sleep=sleep)

        await _reveal(pacer, "abcdefgh")

        assert sleep.delays == [0.018]

    async def test_empty_text_yields_nothing(self) -> None:
        sleep = _RecordingSleep()
        pacer = Pacer(PacingConfig(), sleep=sleep)

        assert await _reveal(pacer, "") == []
        assert sleep.delays == []
