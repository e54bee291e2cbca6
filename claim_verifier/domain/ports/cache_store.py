"""Port interface for the verification cache store."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..models.verification import CacheEntry


class CacheStore(ABC):
    """Abstract key/value store for verification results keyed by claim hash.

    Entries are never deleted by the pipeline; expiry is enforced by
    callers passing ``not_before`` to :meth:`fetch`.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backing store."""
        pass

    @abstractmethod
    async def fetch(self, claim_hash: str, not_before: datetime) -> Optional[CacheEntry]:
        """Return the newest entry for ``claim_hash`` cached at or after ``not_before``."""
        pass

    @abstractmethod
    async def increment_hits(self, claim_hash: str) -> None:
        """Add one to the hit counter of ``claim_hash``."""
        pass

    @abstractmethod
    async def upsert(self, entry: CacheEntry) -> None:
        """Insert or overwrite the entry for ``entry.claim_hash`` (last write wins)."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources."""
        pass

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name of the backend, reported by the health endpoint."""
        pass
