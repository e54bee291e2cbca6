"""Domain models for claims and their classification."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Claim(BaseModel):
    """A natural-language factual statement submitted for verification."""

    text: str = Field(..., description="The claim text to be verified")
    context: Optional[str] = Field(None, description="Optional free-text hint about the claim")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        json_schema_extra = {
            "example": {
                "text": "Apple's revenue grew 8% in Q4 2024.",
                "context": "Investor deck, market overview slide",
            }
        }

    @field_validator("text")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Claim text is required")
        return value


class ClaimType(str, Enum):
    """Routing category assigned to a claim."""

    FINANCIAL = "financial"
    NEWS = "news"
    GENERAL = "general"


class ClaimEntities(BaseModel):
    """Entities extracted from a claim."""

    companies: List[str] = Field(default_factory=list)
    tickers: List[str] = Field(default_factory=list)
    dates: List[str] = Field(default_factory=list)
    percentages: List[str] = Field(default_factory=list)
    currencies: List[str] = Field(default_factory=list)

    @field_validator("companies", "tickers", "dates", "percentages", "currencies", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        # Models sometimes emit null or a bare string instead of a list
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return [str(item) for item in value if item is not None and str(item).strip()]


class ClaimClassification(BaseModel):
    """Result of classifying a claim for source routing."""

    type: ClaimType = ClaimType.GENERAL
    entities: ClaimEntities = Field(default_factory=ClaimEntities)
    timeframe: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("entities", mode="before")
    @classmethod
    def _default_entities(cls, value):
        return {} if value is None else value

    @classmethod
    def default(cls) -> "ClaimClassification":
        """Classification used whenever the classifier cannot answer."""
        return cls(type=ClaimType.GENERAL, entities=ClaimEntities())
