"""Gemini implementation of the AI provider interface."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.models.verification import Source
from ...domain.ports.ai_provider import AIProvider, ModelCallError, ModelResponse

logger = logging.getLogger(__name__)


class GeminiConfig(BaseModel):
    """Configuration for Gemini adapter."""

    api_key: str = Field(..., description="Google AI API key")
    model: str = Field(default="gemini-2.0-flash", description="Model to use")
    timeout: float = Field(default=20.0, description="API timeout in seconds")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language API base URL",
    )


class GeminiAdapter(AIProvider):
    """Gemini implementation of the AI provider interface.

    Grounding uses the ``google_search`` tool; search citations come back in
    ``groundingMetadata.groundingChunks``.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        """Initialize the adapter."""
        self._config = config or GeminiConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Gemini provider: GOOGLE_AI_API_KEY is not configured")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "x-goog-api-key": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        grounded: bool = False,
    ) -> ModelResponse:
        """Run one generateContent call."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }
        if grounded:
            body["tools"] = [{"google_search": {}}]

        try:
            response = await self._client.post(
                f"/models/{self._config.model}:generateContent",
                json=body,
            )
        except httpx.TimeoutException as e:
            raise ModelCallError(f"Gemini request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ModelCallError(f"Gemini request failed: {e}") from e

        if response.status_code == 429:
            raise ModelCallError("Gemini rate limit exceeded", rate_limited=True)
        if response.status_code >= 400:
            logger.error(f"Gemini error {response.status_code}: {response.text[:300]}")
            raise ModelCallError(f"Gemini error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ModelCallError(f"Gemini returned invalid JSON: {e}") from e

        candidates = data.get("candidates") or []
        if not candidates:
            raise ModelCallError("No candidates in Gemini response")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise ModelCallError("No content in Gemini response")

        logger.debug(f"Gemini raw response: {text[:300]}")
        return ModelResponse(
            text=text,
            citations=self._grounding_sources(candidate.get("groundingMetadata") or {}),
            model=self._config.model,
            grounded=grounded,
        )

    @staticmethod
    def _grounding_sources(metadata: Dict[str, Any]) -> List[Source]:
        sources = []
        for chunk in metadata.get("groundingChunks") or []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if web and web.get("uri"):
                sources.append(Source(title=web.get("title") or web["uri"], url=web["uri"]))
        return sources

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "Gemini"

    @property
    def supports_grounding(self) -> bool:
        return True

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
