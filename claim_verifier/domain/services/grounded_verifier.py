"""Grounded verdict generation with an explicit fallback chain."""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models.evidence import EvidenceBundle, FinancialEvidence, NewsArticle
from ..models.verification import Source, Verdict, VerificationStatus, clamp_confidence
from ..ports.ai_provider import AIProvider, ModelCallError, ModelResponse
from .model_output import ModelOutputError, parse_model_json

logger = logging.getLogger(__name__)

VERIFICATION_TEMPERATURE = 0.3
MAX_SOURCES = 8

NO_EVIDENCE_BLOCK = (
    "No external data available. Do not assume any evidence exists beyond "
    "what your own search returns."
)

UNCHECKABLE_SUMMARY = "This claim doesn't contain easily verifiable facts."

FAILURE_SUMMARY = (
    "We could not verify this claim automatically because the verification "
    "service did not return a usable answer. Please review it manually before relying on it."
)

VERIFICATION_PROMPT = """You are a fact-checking assistant. Verify the following claim using the evidence below and your own search results.

CLAIM TO VERIFY:
"{claim}"
{context_block}
EVIDENCE FROM DATA PROVIDERS:
{evidence_block}

Decide one verdict:
- "verified": the claim is supported by credible evidence (confidence 70-100)
- "reliable": plausible and partly supported, but not fully confirmed (confidence 50-74)
- "unreliable": contradicted, or no credible support found (confidence 0-49)

Also determine the date or period the evidence actually refers to (for example "2024-09-30" or "Q3 2024").
Be conservative: if you are unsure, do not mark the claim as verified.

Return ONLY a JSON object:
{{
  "status": "verified" | "reliable" | "unreliable",
  "confidence": <integer 0-100>,
  "summary": "<2-3 sentence explanation of what the evidence shows>",
  "dataDate": "<date or period the evidence refers to, or null>",
  "checkable": <true if the claim contains verifiable facts>,
  "sources": [{{"title": "<title>", "url": "<url>", "publishedAt": "<date or null>"}}]
}}
"""


class VerifierState(str, Enum):
    """States of the verification fallback chain."""

    GROUNDED = "grounded"
    FALLBACK = "fallback"
    FAILED = "failed"


def render_financial(financial: FinancialEvidence) -> str:
    lines = [f"Market data for {financial.ticker} ({financial.source_label}):"]
    quote = financial.quote
    if quote is not None:
        line = f"- Latest price: {quote.price}"
        if quote.change is not None:
            line += f", change {quote.change}"
        if quote.change_percent:
            line += f" ({quote.change_percent})"
        if quote.latest_trading_day:
            line += f", as of {quote.latest_trading_day}"
        lines.append(line)
    if financial.daily_series:
        lines.append("- Recent daily closes:")
        for bar in financial.daily_series:
            lines.append(f"  {bar.date}: close {bar.close}")
    return "\n".join(lines)


def render_news(articles: List[NewsArticle]) -> str:
    lines = ["Recent news articles:"]
    for index, article in enumerate(articles, 1):
        header = f"{index}. {article.title}"
        details = ", ".join(part for part in (article.source_name, article.published_at) if part)
        if details:
            header += f" ({details})"
        lines.append(header)
        if article.description:
            lines.append(f"   {article.description}")
        lines.append(f"   {article.url}")
    return "\n".join(lines)


def render_evidence(evidence: EvidenceBundle) -> str:
    """Render fetched evidence for the prompt, or an explicit no-data notice."""
    if evidence.is_empty:
        return NO_EVIDENCE_BLOCK
    blocks = []
    if evidence.financial is not None:
        blocks.append(render_financial(evidence.financial))
    if evidence.news:
        blocks.append(render_news(evidence.news))
    return "\n\n".join(blocks)


def build_verification_prompt(claim: str, context: Optional[str], evidence: EvidenceBundle) -> str:
    context_block = f"\nCONTEXT: {context}\n" if context else ""
    return VERIFICATION_PROMPT.format(
        claim=claim,
        context_block=context_block,
        evidence_block=render_evidence(evidence),
    )


_STATUS_RANK = {
    VerificationStatus.UNRELIABLE: 1,
    VerificationStatus.RELIABLE: 2,
    VerificationStatus.VERIFIED: 3,
}


def status_for_confidence(confidence: int) -> VerificationStatus:
    """Strongest status a confidence score supports."""
    if confidence >= 70:
        return VerificationStatus.VERIFIED
    if confidence >= 50:
        return VerificationStatus.RELIABLE
    return VerificationStatus.UNRELIABLE


def merge_sources(*groups: List[Source]) -> List[Source]:
    """Concatenate source lists, dropping repeated or empty URLs."""
    merged: List[Source] = []
    seen = set()
    for group in groups:
        for source in group:
            if not source.url or source.url in seen:
                continue
            seen.add(source.url)
            merged.append(source)
    return merged[:MAX_SOURCES]


def evidence_sources(evidence: EvidenceBundle) -> List[Source]:
    sources = [
        Source(title=article.title, url=article.url, published_at=article.published_at)
        for article in evidence.news
    ]
    financial = evidence.financial
    if financial is not None and financial.source_url:
        as_of = financial.quote.latest_trading_day if financial.quote else None
        sources.append(
            Source(
                title=f"{financial.source_label}: {financial.ticker} market data",
                url=financial.source_url,
                published_at=as_of,
            )
        )
    return sources


def _model_sources(raw: Any) -> List[Source]:
    sources = []
    if not isinstance(raw, list):
        return sources
    for item in raw:
        if not isinstance(item, dict) or not item.get("url"):
            continue
        try:
            sources.append(
                Source(
                    title=str(item.get("title") or item["url"]),
                    url=str(item["url"]),
                    published_at=item.get("publishedAt") or item.get("published_at"),
                )
            )
        except ValidationError:
            continue
    return sources


def verdict_from_payload(
    payload: Dict[str, Any],
    response: ModelResponse,
    evidence: EvidenceBundle,
    grounded: bool,
) -> Verdict:
    """Turn the model's JSON into a :class:`Verdict`.

    Confidence is clamped to [0, 100]; a missing or non-numeric value is 0.
    A missing or unknown status is derived from the confidence band, and a
    status stronger than its band is lowered to the band. A model-reported
    ``unable_to_verify`` keeps its meaning and forces confidence to 0.
    """
    confidence = clamp_confidence(payload.get("confidence"))

    raw_status = str(payload.get("status") or "").strip().lower()
    try:
        status = VerificationStatus(raw_status)
    except ValueError:
        status = status_for_confidence(confidence)

    banded = status_for_confidence(confidence)
    if _STATUS_RANK.get(status, 0) > _STATUS_RANK[banded]:
        status = banded

    summary = str(payload.get("summary") or "").strip()
    if not summary:
        raise ModelOutputError("Model output has no summary")

    if payload.get("checkable") is False and status is not VerificationStatus.UNABLE_TO_VERIFY:
        status = VerificationStatus.UNRELIABLE
        confidence = min(confidence, 49)
        summary = UNCHECKABLE_SUMMARY

    requires_review = False
    if status is VerificationStatus.UNABLE_TO_VERIFY:
        confidence = 0
        requires_review = True

    data_date = payload.get("dataDate") or payload.get("data_date")
    return Verdict(
        status=status,
        confidence=confidence,
        summary=summary,
        sources=merge_sources(_model_sources(payload.get("sources")), response.citations, evidence_sources(evidence)),
        data_date=str(data_date).strip() if data_date else None,
        grounded=grounded,
        requires_manual_review=requires_review,
    )


def failure_verdict(evidence: Optional[EvidenceBundle] = None, summary: str = FAILURE_SUMMARY) -> Verdict:
    """Terminal state of the chain: never reported as a verification."""
    return Verdict(
        status=VerificationStatus.UNABLE_TO_VERIFY,
        confidence=0,
        summary=summary,
        sources=evidence_sources(evidence) if evidence else [],
        grounded=False,
        requires_manual_review=True,
    )


class GroundedVerifier:
    """Produces the authoritative verdict for a claim.

    Runs a three-state machine: GROUNDED (search-augmented call) moves to
    FALLBACK (same prompt, no grounding) on any call or parse failure, and
    FALLBACK moves to FAILED, which yields ``unable_to_verify``.
    """

    def __init__(self, ai_provider: AIProvider, temperature: float = VERIFICATION_TEMPERATURE):
        self._ai = ai_provider
        self._temperature = temperature

    async def verify(
        self,
        claim: str,
        context: Optional[str],
        evidence: EvidenceBundle,
    ) -> Verdict:
        prompt = build_verification_prompt(claim, context, evidence)
        state = VerifierState.GROUNDED if self._ai.supports_grounding else VerifierState.FALLBACK

        while True:
            if state is VerifierState.FAILED:
                logger.error("❌ Grounded and fallback verification both failed")
                return failure_verdict(evidence)

            grounded = state is VerifierState.GROUNDED
            verdict = await self._attempt(prompt, evidence, grounded)
            if verdict is not None:
                return verdict

            state = VerifierState.FALLBACK if grounded else VerifierState.FAILED
            logger.warning(f"🔁 Verification moving to state: {state.value}")

    async def _attempt(self, prompt: str, evidence: EvidenceBundle, grounded: bool) -> Optional[Verdict]:
        """One model call; None means the chain should advance."""
        label = "grounded" if grounded else "ungrounded"
        try:
            response = await self._ai.complete(prompt, temperature=self._temperature, grounded=grounded)
            verdict = verdict_from_payload(parse_model_json(response.text), response, evidence, grounded)
        except ModelCallError as e:
            if e.rate_limited:
                logger.warning(f"⏳ {label} verification rate limited: {e}")
            else:
                logger.warning(f"⚠️ {label} verification call failed: {e}")
            return None
        except (ModelOutputError, ValidationError) as e:
            logger.warning(f"⚠️ {label} verification returned unusable output: {e}")
            return None
        except Exception as e:
            logger.warning(f"⚠️ Unexpected {label} verification error: {e}", exc_info=True)
            return None

        logger.info(f"🧾 {label} verdict: {verdict.status.value} ({verdict.confidence})")
        return verdict
