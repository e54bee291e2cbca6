"""Tests for the NewsAPI adapter."""

from datetime import date

import httpx
import pytest

from claim_verifier.domain.ports.news_provider import NewsSearchError
from claim_verifier.infrastructure.news.newsapi_adapter import NewsAPIAdapter, NewsAPIConfig


def _adapter(handler) -> NewsAPIAdapter:
    adapter = NewsAPIAdapter(NewsAPIConfig(api_key="news-key"))
    adapter._client = httpx.AsyncClient(
        base_url="https://news.test/v2",
        transport=httpx.MockTransport(handler),
    )
    return adapter


@pytest.mark.asyncio
async def test_search_sends_query_parameters_and_parses_articles():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "status": "ok",
                "articles": [
                    {
                        "title": "Tesla deliveries beat estimates",
                        "url": "https://news.test/tesla",
                        "publishedAt": "2026-10-02T12:00:00Z",
                        "source": {"name": "Wire"},
                        "description": "Quarterly deliveries rose.",
                    },
                    {"title": "[Removed]", "url": "https://removed.test"},
                    {"title": "No link"},
                ],
            },
        )

    adapter = _adapter(handler)
    articles = await adapter.search('"Tesla"', date(2026, 9, 18), page_size=10)
    await adapter.shutdown()

    assert len(articles) == 1
    article = articles[0]
    assert article.title == "Tesla deliveries beat estimates"
    assert article.source_name == "Wire"
    assert article.published_at == "2026-10-02T12:00:00Z"
    params = seen[0].url.params
    assert params["q"] == '"Tesla"'
    assert params["from"] == "2026-09-18"
    assert params["sortBy"] == "relevancy"
    assert params["pageSize"] == "10"
    assert params["language"] == "en"


@pytest.mark.asyncio
async def test_error_status_raises():
    adapter = _adapter(
        lambda request: httpx.Response(
            401, json={"status": "error", "code": "apiKeyInvalid", "message": "Your API key is invalid."}
        )
    )

    with pytest.raises(NewsSearchError, match="apiKeyInvalid"):
        await adapter.search("Tesla", date(2026, 9, 18))


@pytest.mark.asyncio
async def test_non_json_response_raises():
    adapter = _adapter(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

    with pytest.raises(NewsSearchError):
        await adapter.search("Tesla", date(2026, 9, 18))


@pytest.mark.asyncio
async def test_empty_result_is_not_an_error():
    adapter = _adapter(lambda request: httpx.Response(200, json={"status": "ok", "articles": []}))

    assert await adapter.search("Tesla", date(2026, 9, 18)) == []
