"""Tests for the Alpha Vantage adapter."""

import httpx
import pytest

from claim_verifier.domain.models.claim import ClaimEntities
from claim_verifier.domain.models.evidence import EvidenceBundle
from claim_verifier.domain.ports.market_data_provider import MarketDataError
from claim_verifier.domain.services.financial_fetcher import FinancialFetcher
from claim_verifier.domain.services.grounded_verifier import evidence_sources, render_evidence
from claim_verifier.infrastructure.market_data.alpha_vantage_adapter import (
    AlphaVantageAdapter,
    AlphaVantageConfig,
)

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "AAPL",
        "05. price": "189.8400",
        "06. volume": "51234567",
        "07. latest trading day": "2026-10-16",
        "08. previous close": "187.0000",
        "09. change": "2.8400",
        "10. change percent": "1.5187%",
    }
}

DAILY_SERIES = {
    "Time Series (Daily)": {
        day: {"1. open": "10", "2. high": "12", "3. low": "9", "4. close": close, "5. volume": "100"}
        for day, close in [
            ("2026-10-12", "10.5"),
            ("2026-10-16", "11.0"),
            ("2026-10-14", "10.8"),
            ("2026-10-15", "10.9"),
            ("2026-10-13", "10.6"),
            ("2026-10-09", "10.1"),
        ]
    }
}


def _adapter(handler) -> AlphaVantageAdapter:
    adapter = AlphaVantageAdapter(AlphaVantageConfig(api_key="secret-key"))
    adapter._client = httpx.AsyncClient(
        base_url="https://av.test",
        transport=httpx.MockTransport(handler),
    )
    return adapter


@pytest.mark.asyncio
async def test_get_quote_parses_global_quote():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=GLOBAL_QUOTE)

    adapter = _adapter(handler)
    quote = await adapter.get_quote("AAPL")
    await adapter.shutdown()

    assert quote.symbol == "AAPL"
    assert quote.price == pytest.approx(189.84)
    assert quote.change == pytest.approx(2.84)
    assert quote.change_percent == "1.5187%"
    assert quote.volume == 51234567
    assert quote.latest_trading_day == "2026-10-16"
    assert seen[0].url.params["function"] == "GLOBAL_QUOTE"
    assert seen[0].url.params["symbol"] == "AAPL"


@pytest.mark.asyncio
async def test_daily_series_is_newest_first_and_truncated():
    adapter = _adapter(lambda request: httpx.Response(200, json=DAILY_SERIES))

    bars = await adapter.get_daily_series("AAPL", days=5)

    assert [bar.date for bar in bars] == [
        "2026-10-16",
        "2026-10-15",
        "2026-10-14",
        "2026-10-13",
        "2026-10-12",
    ]
    assert bars[0].close == pytest.approx(11.0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."},
        {"Information": "Please subscribe to any of the premium plans."},
        {"Error Message": "Invalid API call."},
    ],
)
async def test_in_band_errors_raise(payload):
    adapter = _adapter(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(MarketDataError):
        await adapter.get_quote("AAPL")


@pytest.mark.asyncio
async def test_empty_quote_raises():
    adapter = _adapter(lambda request: httpx.Response(200, json={"Global Quote": {}}))

    with pytest.raises(MarketDataError, match="No quote"):
        await adapter.get_quote("ZZZZ")


@pytest.mark.asyncio
async def test_transport_error_does_not_leak_api_key():
    def handler(request):
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    adapter = _adapter(handler)

    with pytest.raises(MarketDataError) as exc_info:
        await adapter.get_quote("AAPL")

    assert "secret-key" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_market_data_is_prompt_evidence_but_not_a_source():
    adapter = _adapter(lambda request: httpx.Response(200, json=GLOBAL_QUOTE))

    result = await FinancialFetcher(adapter).fetch(ClaimEntities(tickers=["AAPL"]))
    bundle = EvidenceBundle(financial=result.data)

    assert adapter.source_url("AAPL") == ""
    assert result.data.source_url is None
    assert "Market data for AAPL (Alpha Vantage)" in render_evidence(bundle)
    assert evidence_sources(bundle) == []
