"""Best-effort market data lookup for financial claims."""

import asyncio
import logging
import re
from typing import Dict, Optional

from ..models.claim import ClaimEntities
from ..models.evidence import FetchResult, FinancialEvidence
from ..ports.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)

# Names as they usually appear in claims; keys are lowercase
COMPANY_TICKERS: Dict[str, str] = {
    "apple": "AAPL",
    "microsoft": "MSFT",
    "alphabet": "GOOGL",
    "google": "GOOGL",
    "amazon": "AMZN",
    "meta": "META",
    "meta platforms": "META",
    "facebook": "META",
    "tesla": "TSLA",
    "nvidia": "NVDA",
    "netflix": "NFLX",
    "salesforce": "CRM",
    "oracle": "ORCL",
    "adobe": "ADBE",
    "intel": "INTC",
    "amd": "AMD",
    "ibm": "IBM",
    "jpmorgan": "JPM",
    "jpmorgan chase": "JPM",
    "walmart": "WMT",
    "johnson & johnson": "JNJ",
    "coca-cola": "KO",
    "disney": "DIS",
    "uber": "UBER",
    "airbnb": "ABNB",
    "shopify": "SHOP",
    "spotify": "SPOT",
    "snowflake": "SNOW",
    "palantir": "PLTR",
}

_CORPORATE_SUFFIX = re.compile(
    r"[,.]?\s+(inc|incorporated|corp|corporation|co|company|ltd|limited|plc|llc|group|holdings)\.?$",
    re.IGNORECASE,
)
_TICKER = re.compile(r"^[A-Z][A-Z0-9.\-]{0,9}$")


def resolve_ticker(entities: ClaimEntities) -> Optional[str]:
    """Pick a ticker: the first extracted ticker, else the first company's table entry."""
    if entities.tickers:
        candidate = entities.tickers[0].strip().lstrip("$").upper()
        if ":" in candidate:  # NASDAQ:AAPL
            candidate = candidate.split(":")[-1]
        if _TICKER.match(candidate):
            return candidate

    if entities.companies:
        name = entities.companies[0].strip().lower()
        name = _CORPORATE_SUFFIX.sub("", name).strip()
        return COMPANY_TICKERS.get(name)

    return None


class FinancialFetcher:
    """Fetches a quote and a recent daily series for the claim's ticker.

    The two calls are independent: either may fail without cancelling the
    other. All failures become ``FetchResult.no_data``.
    """

    def __init__(self, provider: MarketDataProvider, series_days: int = 5):
        self._provider = provider
        self._series_days = series_days

    async def fetch(self, entities: ClaimEntities) -> FetchResult[FinancialEvidence]:
        ticker = resolve_ticker(entities)
        if not ticker:
            logger.info("📉 No ticker or known company in claim - skipping market data")
            return FetchResult.no_data("no ticker resolved")

        logger.info(f"📈 Fetching market data for {ticker}")
        quote, series = await asyncio.gather(
            self._provider.get_quote(ticker),
            self._provider.get_daily_series(ticker, days=self._series_days),
            return_exceptions=True,
        )

        if isinstance(quote, BaseException):
            logger.warning(f"⚠️ Quote lookup failed for {ticker}: {quote}")
            quote = None
        if isinstance(series, BaseException):
            logger.warning(f"⚠️ Daily series lookup failed for {ticker}: {series}")
            series = []

        if quote is None and not series:
            return FetchResult.no_data(f"no market data for {ticker}")

        return FetchResult.found(
            FinancialEvidence(
                ticker=ticker,
                quote=quote,
                daily_series=list(series),
                source_label=self._provider.source_label,
                source_url=self._provider.source_url(ticker) or None,
            )
        )
