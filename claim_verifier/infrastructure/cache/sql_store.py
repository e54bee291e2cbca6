"""Relational cache store using SQLAlchemy."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text, create_engine, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from ...domain.models.verification import CacheEntry, VerificationResult
from ...domain.ports.cache_store import CacheStore

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class VerificationCacheRecord(Base):
    __tablename__ = "verification_cache"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    claim_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    claim_text: Mapped[str] = mapped_column(Text, nullable=False)
    verification_result: Mapped[dict] = mapped_column(JSON, nullable=False)
    cached_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    hits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SQLCacheStore(CacheStore):
    """Stores verification results in the ``verification_cache`` table.

    SQLAlchemy sessions are synchronous, so each operation runs in a worker
    thread. Concurrent upserts on one hash resolve as last write wins.
    """

    def __init__(self, database_url: str, timeout: float = 5.0):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL
            timeout: Per-operation timeout in seconds
        """
        self._database_url = database_url
        self._timeout = timeout
        self._engine = create_engine(database_url, pool_pre_ping=True)
        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

    async def _run(self, fn, *args):
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self._timeout)

    async def initialize(self) -> None:
        """Create the cache table if it does not exist."""
        await self._run(Base.metadata.create_all, self._engine)
        logger.info("🗄️ SQL verification cache ready")

    def _fetch(self, claim_hash: str, not_before: datetime) -> Optional[CacheEntry]:
        with self._sessions() as session:
            record = session.scalars(
                select(VerificationCacheRecord)
                .where(VerificationCacheRecord.claim_hash == claim_hash)
                .where(VerificationCacheRecord.cached_at >= not_before)
                .order_by(VerificationCacheRecord.cached_at.desc())
                .limit(1)
            ).first()
            if record is None:
                return None
            return CacheEntry(
                claim_hash=record.claim_hash,
                claim_text_preview=record.claim_text,
                result=VerificationResult.model_validate(record.verification_result),
                cached_at=_as_utc(record.cached_at),
                hits=record.hits,
            )

    async def fetch(self, claim_hash: str, not_before: datetime) -> Optional[CacheEntry]:
        return await self._run(self._fetch, claim_hash, not_before)

    def _increment_hits(self, claim_hash: str) -> None:
        with self._sessions() as session:
            session.execute(
                update(VerificationCacheRecord)
                .where(VerificationCacheRecord.claim_hash == claim_hash)
                .values(hits=VerificationCacheRecord.hits + 1)
            )
            session.commit()

    async def increment_hits(self, claim_hash: str) -> None:
        await self._run(self._increment_hits, claim_hash)

    def _write(self, session: Session, entry: CacheEntry) -> None:
        payload = entry.result.model_dump(mode="json", by_alias=True, exclude_none=True)
        record = session.scalars(
            select(VerificationCacheRecord).where(VerificationCacheRecord.claim_hash == entry.claim_hash)
        ).first()
        if record is None:
            session.add(
                VerificationCacheRecord(
                    claim_hash=entry.claim_hash,
                    claim_text=entry.claim_text_preview,
                    verification_result=payload,
                    cached_at=entry.cached_at,
                    hits=entry.hits,
                )
            )
        else:
            record.claim_text = entry.claim_text_preview
            record.verification_result = payload
            record.cached_at = entry.cached_at
            record.hits = entry.hits
        session.commit()

    def _upsert(self, entry: CacheEntry) -> None:
        with self._sessions() as session:
            try:
                self._write(session, entry)
                return
            except IntegrityError:
                # A concurrent writer inserted the same hash first; overwrite it
                session.rollback()
            self._write(session, entry)

    async def upsert(self, entry: CacheEntry) -> None:
        await self._run(self._upsert, entry)

    async def shutdown(self) -> None:
        self._engine.dispose()

    @property
    def backend_name(self) -> str:
        return "sql"
