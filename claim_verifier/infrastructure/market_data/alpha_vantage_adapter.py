"""Alpha Vantage implementation of the market data provider interface."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.models.evidence import DailyBar, StockQuote
from ...domain.ports.market_data_provider import MarketDataError, MarketDataProvider

logger = logging.getLogger(__name__)


class AlphaVantageConfig(BaseModel):
    """Configuration for Alpha Vantage adapter."""

    api_key: str = Field(..., description="Alpha Vantage API key")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    base_url: str = Field(default="https://www.alphavantage.co", description="API base URL")


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


class AlphaVantageAdapter(MarketDataProvider):
    """Quote and daily series lookups against the Alpha Vantage query API."""

    def __init__(self, config: Optional[AlphaVantageConfig] = None):
        """Initialize the adapter."""
        self._config = config or AlphaVantageConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
            )
        return self._client

    async def _query(self, function: str, ticker: str) -> Dict[str, Any]:
        params = {"function": function, "symbol": ticker, "apikey": self._config.api_key}
        try:
            response = await self._get_client().get("/query", params=params)
        except httpx.HTTPError as e:
            # The request URL carries the API key, so only the error type is reported
            raise MarketDataError(f"{function} request for {ticker} failed: {type(e).__name__}") from None

        if response.status_code >= 400:
            raise MarketDataError(f"{function} request for {ticker} returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise MarketDataError(f"{function} response for {ticker} is not JSON") from None

        # Alpha Vantage reports throttling and bad symbols in-band with HTTP 200
        for key in ("Error Message", "Note", "Information"):
            if key in data:
                raise MarketDataError(f"{function} for {ticker}: {str(data[key])[:200]}")
        return data

    async def get_quote(self, ticker: str) -> StockQuote:
        """Fetch the current quote for ``ticker``."""
        data = await self._query("GLOBAL_QUOTE", ticker)
        quote = data.get("Global Quote") or {}
        price = _to_float(quote.get("05. price"))
        if price is None:
            raise MarketDataError(f"No quote available for {ticker}")

        return StockQuote(
            symbol=quote.get("01. symbol") or ticker,
            price=price,
            change=_to_float(quote.get("09. change")),
            change_percent=quote.get("10. change percent"),
            volume=_to_int(quote.get("06. volume")),
            latest_trading_day=quote.get("07. latest trading day"),
            previous_close=_to_float(quote.get("08. previous close")),
        )

    async def get_daily_series(self, ticker: str, days: int = 5) -> List[DailyBar]:
        """Fetch the most recent ``days`` daily bars, newest first."""
        data = await self._query("TIME_SERIES_DAILY", ticker)
        series = data.get("Time Series (Daily)") or {}
        if not series:
            raise MarketDataError(f"No daily series available for {ticker}")

        bars = []
        for day in sorted(series, reverse=True)[:days]:
            values = series[day]
            close = _to_float(values.get("4. close"))
            if close is None:
                continue
            bars.append(
                DailyBar(
                    date=day,
                    open=_to_float(values.get("1. open")) or close,
                    high=_to_float(values.get("2. high")) or close,
                    low=_to_float(values.get("3. low")) or close,
                    close=close,
                    volume=_to_int(values.get("5. volume")),
                )
            )
        if not bars:
            raise MarketDataError(f"Daily series for {ticker} has no usable rows")
        return bars

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def source_label(self) -> str:
        return "Alpha Vantage"
