"""Port interface for news search providers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List

from ..models.evidence import NewsArticle


class NewsSearchError(RuntimeError):
    """The news search provider could not return results."""


class NewsProvider(ABC):
    """Abstract interface for a search-style news API."""

    @abstractmethod
    async def search(
        self,
        query: str,
        from_date: date,
        sort_by: str = "relevancy",
        page_size: int = 10,
    ) -> List[NewsArticle]:
        """Search articles published on or after ``from_date``.

        Raises:
            NewsSearchError: On HTTP or payload errors
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of the provider."""
        pass
