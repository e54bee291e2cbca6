"""Language-model based claim classification."""

import logging

from pydantic import ValidationError

from ..models.claim import ClaimClassification
from ..ports.ai_provider import AIProvider, ModelCallError
from .model_output import ModelOutputError, parse_model_json

logger = logging.getLogger(__name__)

CLASSIFICATION_TEMPERATURE = 0.1

CLASSIFICATION_PROMPT = """You classify factual claims so they can be routed to the right data sources.

Return ONLY a JSON object with this exact shape:
{{
  "type": "financial" | "news" | "general",
  "entities": {{
    "companies": ["company names"],
    "tickers": ["stock ticker symbols"],
    "dates": ["dates or periods mentioned"],
    "percentages": ["percentages mentioned"],
    "currencies": ["currency amounts mentioned"]
  }},
  "timeframe": "the period the claim refers to, e.g. Q4 2024, or null"
}}

Rules:
- "financial": company results, stock prices, revenue, valuations, market sizes.
- "news": recent events, announcements, launches, policy changes.
- "general": everything else.
- Leave an entity list empty when nothing of that kind is mentioned.

CLAIM:
"{claim}"
"""


class ClaimClassifier:
    """Tags a claim's type, entities and timeframe.

    Never raises: any transport, parse or validation failure yields
    :meth:`ClaimClassification.default`.
    """

    def __init__(self, ai_provider: AIProvider):
        self._ai = ai_provider

    async def classify(self, claim_text: str) -> ClaimClassification:
        prompt = CLASSIFICATION_PROMPT.format(claim=claim_text)
        try:
            response = await self._ai.complete(
                prompt,
                temperature=CLASSIFICATION_TEMPERATURE,
                grounded=False,
            )
            classification = ClaimClassification.model_validate(parse_model_json(response.text))
        except (ModelCallError, ModelOutputError, ValidationError) as e:
            logger.warning(f"⚠️ Claim classification failed, using default: {e}")
            return ClaimClassification.default()
        except Exception as e:
            logger.warning(f"⚠️ Unexpected classifier error, using default: {e}", exc_info=True)
            return ClaimClassification.default()

        logger.info(
            f"🏷️ Classified claim as {classification.type.value} "
            f"(companies={classification.entities.companies}, tickers={classification.entities.tickers})"
        )
        return classification
