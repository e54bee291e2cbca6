"""Tests for the SQLAlchemy cache store against SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from claim_verifier.domain.models.verification import (
    CacheEntry,
    Freshness,
    Source,
    VerificationResult,
    VerificationStatus,
)
from claim_verifier.infrastructure.cache.sql_store import SQLCacheStore

HASH = "c" * 64


def _entry(cached_at: datetime, summary: str = "Matches the 10-K.", hits: int = 0) -> CacheEntry:
    return CacheEntry(
        claim_hash=HASH,
        claim_text_preview="Tesla delivered 1.8M vehicles in 2023",
        result=VerificationResult(
            status=VerificationStatus.VERIFIED,
            confidence=88,
            summary=summary,
            sources=[Source(title="Tesla IR", url="https://ir.tesla.test", published_at="2024-01-02")],
            freshness=Freshness.STALE,
            freshness_reason="References 2023 (3 years ago)",
        ),
        cached_at=cached_at,
        hits=hits,
    )


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    store = SQLCacheStore(f"sqlite:///{tmp_path}/cache.db")
    await store.initialize()
    yield store
    await store.shutdown()


@pytest.mark.asyncio
async def test_round_trip_preserves_result(sql_store):
    now = datetime.now(timezone.utc)
    await sql_store.upsert(_entry(now))

    entry = await sql_store.fetch(HASH, now - timedelta(days=7))

    assert entry is not None
    assert entry.result.status is VerificationStatus.VERIFIED
    assert entry.result.sources[0].published_at == "2024-01-02"
    assert entry.result.freshness_reason == "References 2023 (3 years ago)"
    assert entry.cached_at.tzinfo is not None


@pytest.mark.asyncio
async def test_expired_rows_are_not_returned(sql_store):
    now = datetime.now(timezone.utc)
    await sql_store.upsert(_entry(now - timedelta(days=8)))

    assert await sql_store.fetch(HASH, now - timedelta(days=7)) is None


@pytest.mark.asyncio
async def test_upsert_overwrites_existing_row(sql_store):
    now = datetime.now(timezone.utc)
    await sql_store.upsert(_entry(now - timedelta(days=8), summary="old", hits=3))
    await sql_store.upsert(_entry(now, summary="new"))

    entry = await sql_store.fetch(HASH, now - timedelta(days=7))

    assert entry.result.summary == "new"
    assert entry.hits == 0


@pytest.mark.asyncio
async def test_increment_hits(sql_store):
    now = datetime.now(timezone.utc)
    await sql_store.upsert(_entry(now))

    await sql_store.increment_hits(HASH)

    entry = await sql_store.fetch(HASH, now - timedelta(days=7))
    assert entry.hits == 1
    assert sql_store.backend_name == "sql"
