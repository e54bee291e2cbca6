"""Claim verification API endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.models.claim import Claim
from ...domain.models.verification import VerificationResult
from ...domain.services.verification_service import VerificationService
from ...infrastructure.dependencies import get_verification_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


class VerifyClaimRequest(BaseModel):
    """Request model for claim verification."""

    claim: Any = Field(None, description="Claim text to verify")
    context: Optional[str] = Field(None, description="Optional context for the claim")


def get_claim(request: VerifyClaimRequest) -> Claim:
    """Validate the request body before any service is built.

    Raises:
        HTTPException: 400 if the claim text is missing or blank
    """
    if not isinstance(request.claim, str) or not request.claim.strip():
        raise HTTPException(status_code=400, detail="Claim text is required")
    return Claim(text=request.claim, context=request.context or None)


@router.post(
    "/verify-claim",
    response_model=VerificationResult,
    response_model_exclude_none=True,
)
async def verify_claim(
    claim: Claim = Depends(get_claim),
    service: VerificationService = Depends(get_verification_service),
) -> VerificationResult:
    """Verify a factual claim.

    The claim dependency is resolved first, so invalid input is rejected
    even when no language model is configured.

    Returns:
        Structured verification result; pipeline failures are reported as
        ``unable_to_verify`` with HTTP 200
    """
    return await service.verify(claim)
