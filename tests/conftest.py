"""Test configuration and common fixtures."""

import json
from typing import List, Optional, Union

import pytest
import pytest_asyncio

from claim_verifier.domain.ports.ai_provider import AIProvider, ModelResponse
from claim_verifier.infrastructure.cache.memory_store import MemoryCacheStore


class ScriptedAIProvider(AIProvider):
    """AI provider that replays scripted replies in order.

    A reply may be a string, a dict (sent as JSON text), a ModelResponse,
    or an exception instance to raise.
    """

    def __init__(self, replies: Optional[List[Union[str, dict, ModelResponse, Exception]]] = None, grounding: bool = True):
        self.replies = list(replies or [])
        self.calls = []
        self._grounding = grounding
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def complete(self, prompt: str, temperature: float = 0.2, grounded: bool = False) -> ModelResponse:
        self.calls.append({"prompt": prompt, "temperature": temperature, "grounded": grounded})
        if not self.replies:
            raise AssertionError("No scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ModelResponse):
            return reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return ModelResponse(text=reply, grounded=grounded)

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return "Scripted"

    @property
    def supports_grounding(self) -> bool:
        return self._grounding

    @property
    def is_available(self) -> bool:
        return self._initialized


@pytest.fixture
def scripted_ai():
    """Factory for scripted AI providers."""
    def _make(*replies, grounding: bool = True) -> ScriptedAIProvider:
        return ScriptedAIProvider(list(replies), grounding=grounding)
    return _make


@pytest_asyncio.fixture
async def memory_store() -> MemoryCacheStore:
    """Provide an in-memory cache store."""
    store = MemoryCacheStore()
    await store.initialize()
    yield store
    await store.shutdown()
