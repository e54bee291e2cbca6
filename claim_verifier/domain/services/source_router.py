"""Decides which external data fetchers a claim needs."""

from dataclasses import dataclass

from ..models.claim import ClaimClassification, ClaimType


@dataclass(frozen=True)
class SourcePlan:
    """Which fetchers to run for one request."""

    fetch_financial: bool = False
    fetch_news: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.fetch_financial or self.fetch_news)


def route_sources(
    classification: ClaimClassification,
    financial_enabled: bool,
    news_enabled: bool,
) -> SourcePlan:
    """Map a classification to a :class:`SourcePlan`.

    ``financial`` claims use market data and news, ``news`` claims use news
    only, and ``general`` claims rely on the grounded verifier's own search.
    A fetcher without credentials is simply left out.
    """
    if classification.type is ClaimType.FINANCIAL:
        return SourcePlan(fetch_financial=financial_enabled, fetch_news=news_enabled)
    if classification.type is ClaimType.NEWS:
        return SourcePlan(fetch_financial=False, fetch_news=news_enabled)
    return SourcePlan()
