"""BraveWebSearch — WebSearch implementation backed by the Brave Search API."""

import html
import re
import time
from collections import OrderedDict
from collections.abc import Callable

import httpx

from support_agent.config.domain.provider import WebSearchConfig
from support_agent.tools.domain.collaborators import WebResult
from support_agent.tools.infrastructure.observer import WebSearchObserver

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_MAX_DESCRIPTION_CHARS = 500


class TokenBucket:
    """Token-bucket limiter: `rate` tokens per second, at most `capacity` banked."""

    def __init__(
        self,
        rate: float,
        capacity: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._rate = rate
        self._capacity = float(capacity)
        self._tokens = float(capacity)
        self._clock = clock
        self._last_refill = clock()

    def try_acquire(self) -> bool:
        now = self._clock()
        elapsed = now - self._last_refill
        self._tokens = min(self._capacity, self._tokens + elapsed * self._rate)
        self._last_refill = now
        if self._tokens >= 1.0:
            self._tokens -= 1.0
            return True
        return False


class BraveWebSearch:
    """Searches the web through Brave with a small TTL cache and a rate limiter.

    Never raises: a missing API key, an exhausted rate limit, HTTP errors, and
    malformed payloads all yield an empty list.
    """

    def __init__(
        self,
        config: WebSearchConfig,
        observer: WebSearchObserver,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._observer = observer
        self._http = http_client if http_client is not None else httpx.AsyncClient()
        self._clock = clock
        self._limiter = TokenBucket(
            rate=config.rate_per_second, capacity=config.burst, clock=clock
        )
        self._cache: OrderedDict[str, tuple[float, list[WebResult]]] = OrderedDict()

    async def search(self, query: str, limit: int) -> list[WebResult]:
        if not self._config.api_key:
            self._observer.web_search_unconfigured()
            return []

        query = query.strip()
        if len(query) < 2:
            return []
        limit = min(limit, self._config.max_results)

        cache_key = f"{query.lower()}:{limit}"
        cached = self._get_cached(cache_key)
        if cached is not None:
            return cached

        if not self._limiter.try_acquire():
            self._observer.web_search_rate_limited(query=query)
            return []

        try:
            response = await self._http.get(
                self._config.endpoint,
                params={"q": query, "count": limit},
                headers={
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip",
                    "X-Subscription-Token": self._config.api_key,
                },
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self._observer.web_search_failed(query=query, reason=str(exc))
            return []

        results = _parse_results(payload, limit=limit)
        self._set_cache(cache_key, results)
        self._observer.web_search_completed(query=query, result_count=len(results))
        return results

    async def aclose(self) -> None:
        await self._http.aclose()

    def _get_cached(self, key: str) -> list[WebResult] | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        stored_at, results = entry
        if self._clock() - stored_at > self._config.cache_ttl_seconds:
            del self._cache[key]
            return None
        return results

    def _set_cache(self, key: str, results: list[WebResult]) -> None:
        if key not in self._cache and len(self._cache) >= self._config.cache_max_entries:
            self._cache.popitem(last=False)
        self._cache[key] = (self._clock(), results)


def _parse_results(payload: object, limit: int) -> list[WebResult]:
    if not isinstance(payload, dict):
        return []
    web = payload.get("web")
    if not isinstance(web, dict):
        return []
    items = web.get("results") or []
    results: list[WebResult] = []
    for item in items[:limit]:
        if not isinstance(item, dict):
            continue
        results.append(
            WebResult(
                title=_strip_html(str(item.get("title") or "")),
                url=str(item.get("url") or ""),
                description=_strip_html(str(item.get("description") or ""))[
                    :_MAX_DESCRIPTION_CHARS
                ],
            )
        )
    return results


def _strip_html(text: str) -> str:
    text = html.unescape(_TAG_PATTERN.sub("", text))
    return _WHITESPACE_PATTERN.sub(" ", text).strip()
