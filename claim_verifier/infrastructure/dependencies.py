"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from ..domain.ports.cache_store import CacheStore
from ..domain.services.claim_classifier import ClaimClassifier
from ..domain.services.financial_fetcher import FinancialFetcher
from ..domain.services.grounded_verifier import GroundedVerifier
from ..domain.services.news_fetcher import NewsFetcher
from ..domain.services.verification_cache import VerificationCache
from ..domain.services.verification_service import VerificationService
from .ai.factory import AIProviderFactory
from .cache.memory_store import MemoryCacheStore
from .cache.sql_store import SQLCacheStore
from .market_data.alpha_vantage_adapter import AlphaVantageAdapter, AlphaVantageConfig
from .news.newsapi_adapter import NewsAPIAdapter, NewsAPIConfig
from .settings import PipelineSettings

load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Data adapters and the cache are built eagerly. The language model and
    the verification service are created on first use, so a missing model
    credential surfaces as a request-time configuration error.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None):
        """Initialize service container."""
        self.settings = settings or PipelineSettings.from_env()
        self.ai_factory = AIProviderFactory(self.settings)
        self.cache_store = self._build_cache_store()
        self.market_data = None
        self.news = None
        self._cache_ready = False
        self._verification_service: Optional[VerificationService] = None
        self._setup_data_providers()

    def _build_cache_store(self) -> CacheStore:
        if self.settings.database_url:
            logger.info("🗄️ Using SQL verification cache")
            return SQLCacheStore(self.settings.database_url, timeout=self.settings.upstream_timeout)
        logger.info("🗄️ DATABASE_URL not set - using in-memory verification cache")
        return MemoryCacheStore()

    def _setup_data_providers(self) -> None:
        if self.settings.alpha_vantage_api_key:
            self.market_data = AlphaVantageAdapter(
                AlphaVantageConfig(
                    api_key=self.settings.alpha_vantage_api_key,
                    timeout=self.settings.upstream_timeout,
                )
            )
        if self.settings.news_api_key:
            self.news = NewsAPIAdapter(
                NewsAPIConfig(
                    api_key=self.settings.news_api_key,
                    timeout=self.settings.upstream_timeout,
                )
            )

    async def _ensure_cache(self) -> None:
        if self._cache_ready:
            return
        try:
            await self.cache_store.initialize()
        except Exception as e:
            # Lookups and writes are best-effort, so the pipeline still runs
            logger.warning(f"⚠️ Cache store initialization failed: {e}")
        self._cache_ready = True

    async def get_verification_service(self) -> VerificationService:
        """Get the verification service, creating it on first use.

        Raises:
            ProviderConfigurationError: If no language model credential is configured
        """
        if self._verification_service is None:
            logger.info("🔧 Creating VerificationService...")
            ai_provider = await self.ai_factory.create_provider()
            await self._ensure_cache()
            self._verification_service = VerificationService(
                classifier=ClaimClassifier(ai_provider),
                verifier=GroundedVerifier(ai_provider),
                cache=VerificationCache(self.cache_store),
                financial_fetcher=FinancialFetcher(self.market_data) if self.market_data else None,
                news_fetcher=NewsFetcher(self.news) if self.news else None,
                deadline_seconds=self.settings.request_timeout,
            )
            logger.info(f"✅ VerificationService ready ({ai_provider.provider_name})")
        return self._verification_service

    async def shutdown(self) -> None:
        """Release every adapter's resources."""
        await self.ai_factory.shutdown()
        if self.market_data:
            await self.market_data.shutdown()
        if self.news:
            await self.news.shutdown()
        await self.cache_store.shutdown()
        self._verification_service = None
        self._cache_ready = False


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


async def get_verification_service() -> VerificationService:
    """FastAPI dependency for the verification service."""
    return await get_service_container().get_verification_service()
