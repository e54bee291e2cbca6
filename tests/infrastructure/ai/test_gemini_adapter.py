"""Tests for the Gemini adapter."""

import json

import httpx
import pytest
import pytest_asyncio

from claim_verifier.domain.ports.ai_provider import ModelCallError
from claim_verifier.infrastructure.ai.gemini_adapter import GeminiAdapter, GeminiConfig


def _reply(text: str, grounding: dict = None) -> dict:
    candidate = {"content": {"parts": [{"text": text}]}}
    if grounding is not None:
        candidate["groundingMetadata"] = grounding
    return {"candidates": [candidate]}


@pytest_asyncio.fixture
async def gemini():
    """Gemini adapter whose HTTP client is served by a handler the test sets."""
    adapter = GeminiAdapter(GeminiConfig(api_key="test-key"))
    requests = []
    state = {"handler": lambda request: httpx.Response(200, json=_reply("{}"))}

    def dispatch(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return state["handler"](request)

    adapter._client = httpx.AsyncClient(
        base_url="https://gemini.test/v1beta",
        transport=httpx.MockTransport(dispatch),
    )
    adapter._initialized = True
    adapter.requests = requests
    adapter.respond_with = lambda handler: state.update(handler=handler)
    yield adapter
    await adapter.shutdown()


@pytest.mark.asyncio
async def test_initialize_requires_api_key():
    adapter = GeminiAdapter(GeminiConfig(api_key=""))
    with pytest.raises(ConnectionError):
        await adapter.initialize()
    assert not adapter.is_available


@pytest.mark.asyncio
async def test_complete_before_initialize_raises():
    with pytest.raises(RuntimeError, match="not initialized"):
        await GeminiAdapter(GeminiConfig(api_key="k")).complete("hi")


@pytest.mark.asyncio
async def test_ungrounded_call_sends_no_tools(gemini):
    gemini.respond_with(lambda request: httpx.Response(200, json=_reply('{"type": "news"}')))

    response = await gemini.complete("Classify this", temperature=0.1)

    assert response.text == '{"type": "news"}'
    assert response.grounded is False
    request = gemini.requests[0]
    assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
    body = json.loads(request.content)
    assert "tools" not in body
    assert body["generationConfig"]["temperature"] == 0.1


@pytest.mark.asyncio
async def test_grounded_call_returns_search_citations(gemini):
    grounding = {
        "groundingChunks": [
            {"web": {"uri": "https://example.com/a", "title": "Example A"}},
            {"web": {"uri": "https://example.com/b"}},
            {"retrievedContext": {"uri": "ignored"}},
        ]
    }
    gemini.respond_with(lambda request: httpx.Response(200, json=_reply("verdict", grounding)))

    response = await gemini.complete("Verify this", grounded=True)

    body = json.loads(gemini.requests[0].content)
    assert body["tools"] == [{"google_search": {}}]
    assert response.grounded is True
    assert [(s.title, s.url) for s in response.citations] == [
        ("Example A", "https://example.com/a"),
        ("https://example.com/b", "https://example.com/b"),
    ]


@pytest.mark.asyncio
async def test_rate_limit_is_flagged(gemini):
    gemini.respond_with(lambda request: httpx.Response(429, json={"error": {"code": 429}}))

    with pytest.raises(ModelCallError) as exc_info:
        await gemini.complete("Verify this")

    assert exc_info.value.rate_limited is True


@pytest.mark.asyncio
async def test_server_error_raises(gemini):
    gemini.respond_with(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(ModelCallError) as exc_info:
        await gemini.complete("Verify this")

    assert exc_info.value.rate_limited is False


@pytest.mark.asyncio
async def test_empty_candidates_raise(gemini):
    gemini.respond_with(lambda request: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(ModelCallError, match="No candidates"):
        await gemini.complete("Verify this")


@pytest.mark.asyncio
async def test_transport_error_raises(gemini):
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    gemini.respond_with(boom)

    with pytest.raises(ModelCallError):
        await gemini.complete("Verify this")
