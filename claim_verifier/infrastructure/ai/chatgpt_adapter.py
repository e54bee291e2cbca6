"""ChatGPT implementation of the AI provider interface."""

import logging
from typing import Any, List, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from ...domain.models.verification import Source
from ...domain.ports.ai_provider import AIProvider, ModelCallError, ModelResponse

logger = logging.getLogger(__name__)


class ChatGPTConfig(BaseModel):
    """Configuration for ChatGPT adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Model to use")
    max_tokens: int = Field(default=1000, description="Maximum tokens per response")
    timeout: float = Field(default=20.0, description="API timeout in seconds")


class ChatGPTAdapter(AIProvider):
    """ChatGPT implementation of the AI provider interface.

    Ungrounded calls use chat completions. Grounded calls go through the
    Responses API with the web search tool, whose URL citations are
    returned as sources.
    """

    def __init__(self, config: Optional[ChatGPTConfig] = None):
        """Initialize the adapter."""
        self._config = config or ChatGPTConfig(api_key="")
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the OpenAI client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize ChatGPT provider: OPENAI_API_KEY is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                timeout=self._config.timeout,
                max_retries=0,
            )
        self._initialized = True

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        grounded: bool = False,
    ) -> ModelResponse:
        """Run one completion, optionally with web search."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            if grounded:
                text, citations = await self._grounded_completion(prompt, temperature)
            else:
                response = await self._client.chat.completions.create(
                    model=self._config.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                    max_tokens=self._config.max_tokens,
                )
                text, citations = response.choices[0].message.content or "", []
        except openai.RateLimitError as e:
            raise ModelCallError(f"OpenAI rate limit exceeded: {e}", rate_limited=True) from e
        except openai.APITimeoutError as e:
            raise ModelCallError(f"OpenAI request timed out: {e}") from e
        except openai.APIError as e:
            raise ModelCallError(f"OpenAI request failed: {e}") from e

        if not text.strip():
            raise ModelCallError("No content in OpenAI response")

        return ModelResponse(
            text=text,
            citations=citations,
            model=self._config.model,
            grounded=grounded,
        )

    async def _grounded_completion(self, prompt: str, temperature: float):
        response = await self._client.responses.create(
            model=self._config.model,
            input=prompt,
            tools=[{"type": "web_search_preview"}],
            temperature=temperature,
            max_output_tokens=self._config.max_tokens,
        )
        return response.output_text or "", self._url_citations(response.output or [])

    @staticmethod
    def _url_citations(output: List[Any]) -> List[Source]:
        sources = []
        for item in output:
            if getattr(item, "type", None) != "message":
                continue
            for content in getattr(item, "content", None) or []:
                for annotation in getattr(content, "annotations", None) or []:
                    if getattr(annotation, "type", None) == "url_citation" and getattr(annotation, "url", None):
                        sources.append(Source(title=annotation.title or annotation.url, url=annotation.url))
        return sources

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "ChatGPT"

    @property
    def supports_grounding(self) -> bool:
        return True

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
