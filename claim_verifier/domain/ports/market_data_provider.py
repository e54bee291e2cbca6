"""Port interface for stock quote providers."""

from abc import ABC, abstractmethod
from typing import List

from ..models.evidence import DailyBar, StockQuote


class MarketDataError(RuntimeError):
    """The quote provider could not return data."""


class MarketDataProvider(ABC):
    """Abstract interface for a quote / daily time-series HTTP API."""

    @abstractmethod
    async def get_quote(self, ticker: str) -> StockQuote:
        """Fetch the current quote for ``ticker``.

        Raises:
            MarketDataError: If the provider returns no usable quote
        """
        pass

    @abstractmethod
    async def get_daily_series(self, ticker: str, days: int = 5) -> List[DailyBar]:
        """Fetch the most recent ``days`` daily bars, newest first.

        Raises:
            MarketDataError: If the provider returns no usable series
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources."""
        pass

    @property
    @abstractmethod
    def source_label(self) -> str:
        """Human-readable provider name used in prompts and sources."""
        pass

    def source_url(self, ticker: str) -> str:
        """Public page for ``ticker`` at this provider, without credentials.

        Empty when the provider has no browsable page; such evidence is
        rendered into the prompt but not listed as a source.
        """
        return ""
