"""Port interface for language-model providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.verification import Source


class ModelCallError(RuntimeError):
    """A language-model call failed (transport, status, timeout or empty content)."""

    def __init__(self, message: str, rate_limited: bool = False):
        super().__init__(message)
        self.rate_limited = rate_limited


class ProviderConfigurationError(RuntimeError):
    """A required credential or provider setting is missing."""


class ModelResponse(BaseModel):
    """Raw completion text plus any citations the endpoint attached."""

    text: str
    citations: List[Source] = Field(default_factory=list)
    model: Optional[str] = None
    grounded: bool = False


class AIProvider(ABC):
    """Abstract interface for language-model completion endpoints.

    Implementations accept a single prompt and return the model's text.
    When ``grounded`` is True the provider enables its live search
    augmentation; providers without one must report
    ``supports_grounding = False``.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create clients and other resources."""
        pass

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        grounded: bool = False,
    ) -> ModelResponse:
        """Run one completion.

        Raises:
            ModelCallError: On any transport, status or timeout failure
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

    @property
    @abstractmethod
    def supports_grounding(self) -> bool:
        """Whether ``complete(grounded=True)`` performs a live search."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is ready."""
        pass
