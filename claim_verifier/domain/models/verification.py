"""Domain models for verification results and cache entries."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class VerificationStatus(str, Enum):
    """Possible verification outcomes, strongest evidence first."""

    VERIFIED = "verified"  # Evidence supports the claim
    RELIABLE = "reliable"  # Plausible, partially supported
    UNRELIABLE = "unreliable"  # Contradicted or unsupported
    UNABLE_TO_VERIFY = "unable_to_verify"  # The pipeline could not reach a verdict


class Freshness(str, Enum):
    """How current the claim's underlying data is."""

    FRESH = "fresh"
    DATED = "dated"
    STALE = "stale"


def clamp_confidence(value) -> int:
    """Coerce any model-supplied confidence to an integer in [0, 100].

    Missing or non-numeric values become 0.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(round(max(0.0, min(100.0, number))))


class Source(BaseModel):
    """A source cited in support of a verdict."""

    title: str
    url: str
    published_at: Optional[str] = Field(None, alias="publishedAt")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True


class Verdict(BaseModel):
    """Output of the grounded verifier before freshness is attached."""

    status: VerificationStatus
    confidence: int = Field(0, ge=0, le=100)
    summary: str
    sources: List[Source] = Field(default_factory=list)
    data_date: Optional[str] = None
    grounded: bool = False
    requires_manual_review: bool = False

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_confidence(value)


class VerificationResult(BaseModel):
    """Final answer returned to callers and persisted in the cache."""

    status: VerificationStatus
    confidence: int = Field(..., ge=0, le=100)
    sources: List[Source] = Field(default_factory=list)
    summary: str
    freshness: Freshness
    freshness_reason: str = Field(..., alias="freshnessReason")
    data_date: Optional[str] = Field(None, alias="dataDate")
    requires_manual_review: Optional[bool] = Field(None, alias="requiresManualReview")
    cached: Optional[bool] = None

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "status": "verified",
                "confidence": 86,
                "sources": [
                    {
                        "title": "Apple reports fourth quarter results",
                        "url": "https://www.apple.com/newsroom/",
                        "publishedAt": "2024-10-31",
                    }
                ],
                "summary": "Apple's reported Q4 2024 revenue was up 6% year over year.",
                "freshness": "dated",
                "freshnessReason": "Data is 11 months old",
                "dataDate": "2024-09-28",
            }
        }

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_confidence(value)

    def to_payload(self) -> dict:
        """Serialize to the camelCase wire shape, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CacheEntry(BaseModel):
    """A persisted verification keyed by the normalized claim hash."""

    claim_hash: str = Field(..., min_length=64, max_length=64)
    claim_text_preview: str
    result: VerificationResult
    cached_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    hits: int = Field(0, ge=0)
