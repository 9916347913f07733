"""AsyncRestClient のテスト。"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
import pytest

from restclient import (
    AsyncRestClient,
    List,
    ListEndpoint,
    ListResponse,
    RequestConfig,
    RestValidationError,
    json_format,
)
from restclient.http import AsyncRateLimitCoordinator


@json_format
@dataclass
class Article:
    slug: str


@json_format
@dataclass
class ArticlePage(ListResponse[Article]):
    articles: list[Article]
    next_cursor: str | None = None

    def metadata(self) -> dict[str, Any]:
        return {"next_cursor": self.next_cursor}


@dataclass
class ArticlesEndpoint(ListEndpoint):
    cursor: str | None = None
    allowed: bool = True

    def pagename(self, config: RequestConfig) -> str:
        return "articles"

    def parameters(self, config: RequestConfig) -> list[tuple[str, str]]:
        return [("cursor", self.cursor)] if self.cursor else []

    def responsetype(self) -> Any:
        return ArticlePage

    def validate(self, config: RequestConfig) -> bool:
        return self.allowed

    def nextpage(self, page: List[Any]) -> Any:
        cursor = page.metadata.get("next_cursor")
        if cursor is None:
            return None
        return page.request.client.get(ArticlesEndpoint(cursor=cursor))


def _handler(request: httpx.Request) -> httpx.Response:
    cursor = request.url.params.get("cursor")
    if cursor is None:
        payload = {"articles": [{"slug": "a"}, {"slug": "b"}], "next_cursor": "c2"}
    else:
        payload = {"articles": [{"slug": "c"}], "next_cursor": None}
    return httpx.Response(200, json=payload, request=request)


def test_async_get_list_and_next_page() -> None:
    async def run() -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
        async with AsyncRestClient("https://example.invalid", http_client=http_client) as client:
            first = await client.get(ArticlesEndpoint())
            assert isinstance(first, List)
            assert [article.slug for article in first] == ["a", "b"]

            second = await first.nextpage()
            assert [article.slug for article in second] == ["c"]
            assert second.nextpage() is None

    asyncio.run(run())


def test_async_rate_limit_retry() -> None:
    sleeps: list[float] = []
    calls = {"n": 0}

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(429, headers={"Retry-After": "2"}, request=request)
        return _handler(request)

    async def run() -> None:
        config = RequestConfig(
            base_url="https://example.invalid",
            async_limiter=AsyncRateLimitCoordinator(sleep=fake_sleep),
        )
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with AsyncRestClient(config=config, http_client=http_client) as client:
            page = await client.get(ArticlesEndpoint())
            assert len(page) == 2

    asyncio.run(run())
    assert calls["n"] == 2
    assert sleeps == [2]


def test_async_validation_failure_makes_no_call() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return _handler(request)

    async def run() -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with AsyncRestClient("https://example.invalid", http_client=http_client) as client:
            with pytest.raises(RestValidationError):
                await client.get(ArticlesEndpoint(allowed=False))

    asyncio.run(run())
    assert calls["n"] == 0
