"""Read-through / write-through cache of verification results."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.verification import CacheEntry, VerificationResult, VerificationStatus
from ..ports.cache_store import CacheStore

logger = logging.getLogger(__name__)

CACHE_VALIDITY = timedelta(days=7)
PREVIEW_LENGTH = 200


class VerificationCache:
    """Caches results by normalized claim hash for seven days.

    Store failures never reach the caller: a failed read is a miss and a
    failed write is logged and dropped.
    """

    def __init__(self, store: CacheStore, validity: timedelta = CACHE_VALIDITY):
        self._store = store
        self._validity = validity

    @property
    def backend_name(self) -> str:
        return self._store.backend_name

    async def lookup(self, claim_hash: str, now: Optional[datetime] = None) -> Optional[VerificationResult]:
        """Return the cached result marked ``cached=True``, or None on a miss."""
        now = now or datetime.now(timezone.utc)
        try:
            entry = await self._store.fetch(claim_hash, not_before=now - self._validity)
        except Exception as e:
            logger.warning(f"⚠️ Cache lookup failed, treating as miss: {e}")
            return None

        if entry is None:
            logger.info(f"🗄️ Cache miss for {claim_hash[:12]}")
            return None

        try:
            await self._store.increment_hits(claim_hash)
        except Exception as e:
            logger.warning(f"⚠️ Could not record cache hit: {e}")

        logger.info(f"🗄️ Cache hit for {claim_hash[:12]} (previous hits: {entry.hits})")
        return entry.result.model_copy(update={"cached": True})

    async def store(self, claim_hash: str, claim_text: str, result: VerificationResult) -> bool:
        """Persist ``result`` unless it is a pipeline failure. Returns True when written."""
        if result.status is VerificationStatus.UNABLE_TO_VERIFY:
            logger.info("🗄️ Not caching unable_to_verify result")
            return False

        entry = CacheEntry(
            claim_hash=claim_hash,
            claim_text_preview=claim_text[:PREVIEW_LENGTH],
            result=result.model_copy(update={"cached": None}),
            cached_at=datetime.now(timezone.utc),
            hits=0,
        )
        try:
            await self._store.upsert(entry)
        except Exception as e:
            logger.warning(f"⚠️ Cache write failed (result still returned): {e}")
            return False

        logger.info(f"🗄️ Cached verification for {claim_hash[:12]}")
        return True
