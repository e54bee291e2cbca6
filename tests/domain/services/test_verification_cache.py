"""Tests for the verification cache."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from claim_verifier.domain.models.verification import (
    CacheEntry,
    Freshness,
    VerificationResult,
    VerificationStatus,
)
from claim_verifier.domain.services.cache_key import derive_cache_key
from claim_verifier.domain.services.verification_cache import VerificationCache

CLAIM = "Revenue grew 20% in Q4"
HASH = derive_cache_key(CLAIM)


def _result(status: VerificationStatus = VerificationStatus.VERIFIED, confidence: int = 80) -> VerificationResult:
    return VerificationResult(
        status=status,
        confidence=confidence,
        summary="Checked against filings.",
        freshness=Freshness.FRESH,
        freshness_reason="Uses rolling time period",
    )


@pytest.mark.asyncio
async def test_store_then_lookup_marks_cached(memory_store):
    cache = VerificationCache(memory_store)

    assert await cache.store(HASH, CLAIM, _result())
    cached = await cache.lookup(HASH)

    assert cached.cached is True
    assert cached.status is VerificationStatus.VERIFIED
    entry = await memory_store.fetch(HASH, not_before=datetime.now(timezone.utc) - timedelta(days=1))
    assert entry.hits == 1
    assert entry.result.cached is None


@pytest.mark.asyncio
async def test_miss_returns_none(memory_store):
    assert await VerificationCache(memory_store).lookup(HASH) is None


@pytest.mark.asyncio
async def test_entries_older_than_seven_days_are_ignored_not_deleted(memory_store):
    old = datetime.now(timezone.utc) - timedelta(days=8)
    await memory_store.upsert(CacheEntry(claim_hash=HASH, claim_text_preview=CLAIM, result=_result(), cached_at=old))

    assert await VerificationCache(memory_store).lookup(HASH) is None
    assert await memory_store.fetch(HASH, not_before=old - timedelta(days=1)) is not None


@pytest.mark.asyncio
async def test_unable_to_verify_is_never_stored(memory_store):
    cache = VerificationCache(memory_store)

    stored = await cache.store(HASH, CLAIM, _result(VerificationStatus.UNABLE_TO_VERIFY, 0))

    assert stored is False
    assert await cache.lookup(HASH) is None


@pytest.mark.asyncio
async def test_store_resets_hits_and_preview_is_truncated(memory_store):
    cache = VerificationCache(memory_store)
    long_claim = "x" * 500
    key = derive_cache_key(long_claim)

    await cache.store(key, long_claim, _result())
    await cache.lookup(key)
    await cache.store(key, long_claim, _result(confidence=75))

    entry = await memory_store.fetch(key, not_before=datetime.now(timezone.utc) - timedelta(days=1))
    assert entry.hits == 0
    assert entry.result.confidence == 75
    assert len(entry.claim_text_preview) == 200


@pytest.mark.asyncio
async def test_store_failures_are_swallowed():
    store = MagicMock()
    store.backend_name = "broken"
    store.upsert = AsyncMock(side_effect=ConnectionError("db down"))
    store.fetch = AsyncMock(side_effect=ConnectionError("db down"))
    cache = VerificationCache(store)

    assert await cache.store(HASH, CLAIM, _result()) is False
    assert await cache.lookup(HASH) is None


@pytest.mark.asyncio
async def test_hit_counter_failure_still_returns_result(memory_store):
    cache = VerificationCache(memory_store)
    await cache.store(HASH, CLAIM, _result())
    memory_store.increment_hits = AsyncMock(side_effect=RuntimeError("locked"))

    cached = await cache.lookup(HASH)

    assert cached is not None and cached.cached is True
