"""Domain models for evidence gathered from external data sources."""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Tagged outcome of a best-effort fetch.

    ``ok`` is True only when ``data`` holds evidence. A result with
    ``ok=False`` means the source was consulted (or deliberately skipped)
    and produced nothing usable; ``reason`` says why.
    """

    ok: bool
    data: Optional[T] = None
    reason: str = ""

    @classmethod
    def found(cls, data: T) -> "FetchResult[T]":
        return cls(ok=True, data=data)

    @classmethod
    def no_data(cls, reason: str) -> "FetchResult[T]":
        return cls(ok=False, data=None, reason=reason)


class StockQuote(BaseModel):
    """Latest quote for a ticker."""

    symbol: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[str] = None
    volume: Optional[int] = None
    latest_trading_day: Optional[str] = None
    previous_close: Optional[float] = None


class DailyBar(BaseModel):
    """One trading day of a daily time series."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: Optional[int] = None


class FinancialEvidence(BaseModel):
    """Market data collected for the claim's ticker."""

    ticker: str
    quote: Optional[StockQuote] = None
    daily_series: List[DailyBar] = Field(default_factory=list)
    source_label: str = Field(..., description="Human-readable name of the data provider")
    source_url: Optional[str] = None


class NewsArticle(BaseModel):
    """A normalized news search hit."""

    title: str
    url: str
    published_at: Optional[str] = None
    source_name: Optional[str] = None
    description: Optional[str] = None


class EvidenceBundle(BaseModel):
    """Everything the fetchers returned for one request."""

    financial: Optional[FinancialEvidence] = None
    news: List[NewsArticle] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.financial is None and not self.news
