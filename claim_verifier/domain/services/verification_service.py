"""Service for running the end-to-end claim verification pipeline."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from ..models.claim import Claim, ClaimClassification
from ..models.evidence import EvidenceBundle
from ..models.verification import Verdict, VerificationResult
from .cache_key import derive_cache_key
from .claim_classifier import ClaimClassifier
from .financial_fetcher import FinancialFetcher
from .freshness_analyzer import analyze_freshness
from .grounded_verifier import GroundedVerifier, failure_verdict
from .news_fetcher import NewsFetcher
from .source_router import SourcePlan, route_sources
from .verification_cache import VerificationCache

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_SECONDS = 60.0

TIMEOUT_SUMMARY = (
    "Verification did not finish within the allowed time. "
    "Please review this claim manually or try again later."
)


def assemble_result(verdict: Verdict, claim: Claim, now: Optional[datetime] = None) -> VerificationResult:
    """Attach freshness to a verdict and build the response payload."""
    assessment = analyze_freshness(verdict.data_date, claim.text, now=now)
    return VerificationResult(
        status=verdict.status,
        confidence=verdict.confidence,
        sources=verdict.sources,
        summary=verdict.summary,
        freshness=assessment.freshness,
        freshness_reason=assessment.reason,
        data_date=verdict.data_date,
        requires_manual_review=True if verdict.requires_manual_review else None,
    )


class VerificationService:
    """Coordinates cache, classification, evidence gathering and verification.

    Every request gets a structured :class:`VerificationResult`; failures
    inside the pipeline surface as ``unable_to_verify``.
    """

    def __init__(
        self,
        classifier: ClaimClassifier,
        verifier: GroundedVerifier,
        cache: VerificationCache,
        financial_fetcher: Optional[FinancialFetcher] = None,
        news_fetcher: Optional[NewsFetcher] = None,
        deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
    ):
        """Initialize the service.

        Args:
            classifier: Claim classifier
            verifier: Grounded verifier with fallback chain
            cache: Verification cache
            financial_fetcher: Market data fetcher, None when no API key is configured
            news_fetcher: News fetcher, None when no API key is configured
            deadline_seconds: Budget for everything after the cache lookup
        """
        self._classifier = classifier
        self._verifier = verifier
        self._cache = cache
        self._financial = financial_fetcher
        self._news = news_fetcher
        self._deadline = deadline_seconds
        logger.info(
            f"🔧 VerificationService initialized "
            f"(financial={'on' if financial_fetcher else 'off'}, news={'on' if news_fetcher else 'off'}, "
            f"cache={cache.backend_name})"
        )

    @property
    def financial_enabled(self) -> bool:
        return self._financial is not None

    @property
    def news_enabled(self) -> bool:
        return self._news is not None

    @property
    def cache_backend(self) -> str:
        return self._cache.backend_name

    async def verify(self, claim: Claim) -> VerificationResult:
        """Verify a claim, serving from cache when possible."""
        logger.info(f"🔍 Verifying claim: {claim.text[:100]}")
        claim_hash = derive_cache_key(claim.text)

        cached = await self._cache.lookup(claim_hash)
        if cached is not None:
            return cached

        try:
            result = await asyncio.wait_for(self._run_pipeline(claim), timeout=self._deadline)
        except asyncio.TimeoutError:
            logger.error(f"⏱️ Verification exceeded {self._deadline}s deadline")
            return assemble_result(failure_verdict(summary=TIMEOUT_SUMMARY), claim)
        except Exception as e:
            logger.error(f"❌ Verification pipeline failed: {e}", exc_info=True)
            return assemble_result(failure_verdict(), claim)

        logger.info(f"✅ Verification complete: {result.status.value} ({result.confidence})")
        await self._cache.store(claim_hash, claim.text, result)
        return result

    async def _run_pipeline(self, claim: Claim) -> VerificationResult:
        classification = await self._classifier.classify(claim.text)
        plan = route_sources(classification, self.financial_enabled, self.news_enabled)
        logger.info(
            f"🧭 Routing {classification.type.value} claim: "
            f"financial={plan.fetch_financial}, news={plan.fetch_news}"
        )

        evidence = await self.gather_evidence(claim, classification, plan)
        verdict = await self._verifier.verify(claim.text, claim.context, evidence)
        return assemble_result(verdict, claim)

    async def gather_evidence(
        self,
        claim: Claim,
        classification: ClaimClassification,
        plan: SourcePlan,
    ) -> EvidenceBundle:
        """Run the planned fetchers concurrently; each one is best-effort."""
        if plan.is_empty:
            return EvidenceBundle()

        async def no_fetch():
            return None

        financial_task = (
            self._financial.fetch(classification.entities)
            if plan.fetch_financial and self._financial
            else no_fetch()
        )
        news_task = (
            self._news.fetch(classification.entities, claim.text)
            if plan.fetch_news and self._news
            else no_fetch()
        )
        financial, news = await asyncio.gather(financial_task, news_task, return_exceptions=True)

        bundle = EvidenceBundle()
        if isinstance(financial, BaseException):
            logger.warning(f"⚠️ Financial fetcher raised: {financial}")
        elif financial is not None and financial.ok:
            bundle.financial = financial.data
        if isinstance(news, BaseException):
            logger.warning(f"⚠️ News fetcher raised: {news}")
        elif news is not None and news.ok:
            bundle.news = list(news.data)

        logger.info(
            f"📦 Evidence: financial={'yes' if bundle.financial else 'no'}, news={len(bundle.news)} articles"
        )
        return bundle
