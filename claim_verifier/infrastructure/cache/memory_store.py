"""In-process cache store backed by a TTL cache."""

from datetime import datetime
from typing import Optional

from cachetools import TTLCache

from ...domain.models.verification import CacheEntry
from ...domain.ports.cache_store import CacheStore

SEVEN_DAYS = 7 * 24 * 60 * 60


class MemoryCacheStore(CacheStore):
    """Cache store for single-process deployments and tests.

    The TTL only bounds memory; validity is still decided by ``not_before``.
    """

    def __init__(self, maxsize: int = 10000, ttl: float = SEVEN_DAYS):
        """Initialize the store."""
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    async def initialize(self) -> None:
        """Nothing to prepare."""
        pass

    async def fetch(self, claim_hash: str, not_before: datetime) -> Optional[CacheEntry]:
        entry = self._entries.get(claim_hash)
        if entry is None or entry.cached_at < not_before:
            return None
        return entry

    async def increment_hits(self, claim_hash: str) -> None:
        entry = self._entries.get(claim_hash)
        if entry is not None:
            self._entries[claim_hash] = entry.model_copy(update={"hits": entry.hits + 1})

    async def upsert(self, entry: CacheEntry) -> None:
        self._entries[entry.claim_hash] = entry

    async def shutdown(self) -> None:
        self._entries.clear()

    @property
    def backend_name(self) -> str:
        return "memory"
