"""Health check endpoints."""

from typing import Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from ...infrastructure.dependencies import get_service_container

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    llm_provider: Optional[str]
    financial_data: bool
    news_search: bool
    cache_backend: str
    ai_providers: Dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report which collaborators are configured.

    Returns:
        Configuration status of the model, data providers and cache
    """
    container = get_service_container()
    return HealthResponse(
        status="healthy" if container.settings.llm_provider else "degraded",
        llm_provider=container.settings.llm_provider,
        financial_data=container.market_data is not None,
        news_search=container.news is not None,
        cache_backend=container.cache_store.backend_name,
        ai_providers=container.ai_factory.available_providers,
    )
