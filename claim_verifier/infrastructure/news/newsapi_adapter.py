"""NewsAPI implementation of the news provider interface."""

import logging
from datetime import date
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.models.evidence import NewsArticle
from ...domain.ports.news_provider import NewsProvider, NewsSearchError

logger = logging.getLogger(__name__)


class NewsAPIConfig(BaseModel):
    """Configuration for NewsAPI adapter."""

    api_key: str = Field(..., description="NewsAPI key")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    base_url: str = Field(default="https://newsapi.org/v2", description="API base URL")
    language: str = Field(default="en", description="Article language filter")


class NewsAPIAdapter(NewsProvider):
    """Search against the NewsAPI ``/everything`` endpoint."""

    def __init__(self, config: Optional[NewsAPIConfig] = None):
        """Initialize the adapter."""
        self._config = config or NewsAPIConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"X-Api-Key": self._config.api_key},
            )
        return self._client

    async def search(
        self,
        query: str,
        from_date: date,
        sort_by: str = "relevancy",
        page_size: int = 10,
    ) -> List[NewsArticle]:
        """Search articles published on or after ``from_date``."""
        params = {
            "q": query,
            "from": from_date.isoformat(),
            "sortBy": sort_by,
            "pageSize": page_size,
            "language": self._config.language,
        }
        try:
            response = await self._get_client().get("/everything", params=params)
        except httpx.HTTPError as e:
            raise NewsSearchError(f"News search failed: {type(e).__name__}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise NewsSearchError(f"News search returned invalid JSON (HTTP {response.status_code})") from e

        if response.status_code >= 400 or data.get("status") == "error":
            raise NewsSearchError(
                f"News search error {response.status_code}: {data.get('code')} {str(data.get('message') or '')[:200]}"
            )

        articles = []
        for item in data.get("articles") or []:
            title, url = item.get("title"), item.get("url")
            if not title or not url or title == "[Removed]":
                continue
            articles.append(
                NewsArticle(
                    title=title,
                    url=url,
                    published_at=item.get("publishedAt"),
                    source_name=(item.get("source") or {}).get("name"),
                    description=item.get("description"),
                )
            )
        return articles

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def provider_name(self) -> str:
        return "NewsAPI"
