"""Tests for BraveWebSearch and its token bucket."""

import httpx

from support_agent.config.domain.provider import WebSearchConfig
from support_agent.tools.infrastructure.brave import BraveWebSearch, TokenBucket
from tests.engine.fake_clock import FakeClock
from tests.tools.fake_observer import FakeWebSearchObserver

_PAYLOAD = {
    "web": {
        "results": [
            {
                "title": "<b>Enable</b> recording",
                "url": "https://example.com/rec",
                "description": "Open &amp; toggle   <em>Recording</em>.",
            },
            {"title": "Second", "url": "https://example.com/2"},
        ]
    }
}


def _search(
    handler,
    config: WebSearchConfig | None = None,
    clock: FakeClock | None = None,
) -> tuple[BraveWebSearch, FakeWebSearchObserver]:
    observer = FakeWebSearchObserver()
    search = BraveWebSearch(
        config=config or WebSearchConfig(api_key="brave-key"),
        observer=observer,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        clock=clock or FakeClock(),
    )
    return search, observer


class TestBraveWebSearch:
    async def test_request_carries_token_and_query(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_PAYLOAD)

        search, observer = _search(handler)

        results = await search.search("enable recording", limit=5)

        assert seen[0].headers["X-Subscription-Token"] == "brave-key"
        assert seen[0].url.params["q"] == "enable recording"
        assert seen[0].url.params["count"] == "5"
        assert results[0].title == "Enable recording"
        assert results[0].description == "Open & toggle Recording."
        assert results[1].description == ""
        assert observer.completed == [("enable recording", 2)]

    async def test_result_count_is_capped_by_config(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_PAYLOAD)

        search, _ = _search(
            handler, config=WebSearchConfig(api_key="k", max_results=1)
        )

        results = await search.search("enable recording", limit=5)

        assert seen[0].url.params["count"] == "1"
        assert len(results) == 1

    async def test_missing_key_returns_nothing_without_a_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_PAYLOAD)

        search, observer = _search(handler, config=WebSearchConfig())

        assert await search.search("recording", limit=5) == []
        assert calls == []
        assert observer.unconfigured_count == 1

    async def test_http_error_returns_nothing(self) -> None:
        search, observer = _search(lambda request: httpx.Response(500))

        assert await search.search("recording", limit=5) == []
        assert observer.failed[0][0] == "recording"

    async def test_malformed_payload_returns_nothing(self) -> None:
        search, _ = _search(lambda request: httpx.Response(200, json={"web": []}))

        assert await search.search("recording", limit=5) == []

    async def test_repeated_query_is_served_from_cache(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_PAYLOAD)

        search, _ = _search(handler)

        await search.search("Recording", limit=5)
        await search.search("recording ", limit=5)

        assert len(calls) == 1

    async def test_cache_entries_expire(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_PAYLOAD)

        clock = FakeClock()
        search, _ = _search(
            handler,
            config=WebSearchConfig(api_key="k", cache_ttl_seconds=10.0),
            clock=clock,
        )

        await search.search("recording", limit=5)
        clock.advance(11.0)
        await search.search("recording", limit=5)

        assert len(calls) == 2

    async def test_rate_limited_queries_return_nothing(self) -> None:
        search, observer = _search(
            lambda request: httpx.Response(200, json=_PAYLOAD),
            config=WebSearchConfig(api_key="k", burst=1, rate_per_second=0.1),
        )

        await search.search("first query", limit=5)
        results = await search.search("second query", limit=5)

        assert results == []
        assert observer.rate_limited == ["second query"]


class TestTokenBucket:
    def test_burst_then_refill(self) -> None:
        clock = FakeClock()
        bucket = TokenBucket(rate=1.0, capacity=2, clock=clock)

        assert bucket.try_acquire() is True
        assert bucket.try_acquire() is True
        assert bucket.try_acquire() is False

        clock.advance(1.0)

        assert bucket.try_acquire() is True
