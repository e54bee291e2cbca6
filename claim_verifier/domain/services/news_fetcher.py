"""Best-effort news search for claims about recent events."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..models.claim import ClaimEntities
from ..models.evidence import FetchResult, NewsArticle
from ..ports.news_provider import NewsProvider

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 30
PAGE_SIZE = 10
MAX_ARTICLES = 5
FALLBACK_QUERY_WORDS = 5


def build_news_query(entities: ClaimEntities, claim_text: str) -> str:
    """OR-join the extracted company names, else use the claim's first five words."""
    if entities.companies:
        return " OR ".join(entities.companies)
    return " ".join(claim_text.split()[:FALLBACK_QUERY_WORDS])


class NewsFetcher:
    """Searches the last 30 days of news, most relevant first."""

    def __init__(self, provider: NewsProvider):
        self._provider = provider

    async def fetch(
        self,
        entities: ClaimEntities,
        claim_text: str,
        now: Optional[datetime] = None,
    ) -> FetchResult[List[NewsArticle]]:
        query = build_news_query(entities, claim_text)
        if not query:
            return FetchResult.no_data("empty query")

        now = now or datetime.now(timezone.utc)
        from_date = (now - timedelta(days=LOOKBACK_DAYS)).date()

        logger.info(f"📰 Searching news for: {query[:80]}")
        try:
            articles = await self._provider.search(
                query,
                from_date=from_date,
                sort_by="relevancy",
                page_size=PAGE_SIZE,
            )
        except Exception as e:
            logger.warning(f"⚠️ News search failed: {e}")
            return FetchResult.no_data("news search failed")

        articles = articles[:MAX_ARTICLES]
        if not articles:
            return FetchResult.no_data("no articles found")

        logger.info(f"📰 Found {len(articles)} news articles")
        return FetchResult.found(articles)
