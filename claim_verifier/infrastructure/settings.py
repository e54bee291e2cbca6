"""Pipeline configuration loaded from the environment."""

import logging
import os
from typing import List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ Ignoring invalid {name}={raw!r}, using {default}")
        return default


class PipelineSettings(BaseModel):
    """Configuration for the verification pipeline and its collaborators."""

    llm_provider: Optional[str] = None  # 'gemini' or 'chatgpt'
    google_ai_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    alpha_vantage_api_key: str = ""
    news_api_key: str = ""
    database_url: Optional[str] = None
    request_timeout: float = 60.0
    upstream_timeout: float = 20.0
    cors_allow_origins: List[str] = ["*"]

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """Create configuration from environment variables."""
        google_key = os.getenv("GOOGLE_AI_API_KEY", "")
        openai_key = os.getenv("OPENAI_API_KEY", "")

        llm_provider = (os.getenv("LLM_PROVIDER") or "").strip().lower() or None
        if llm_provider is None:
            if google_key:
                llm_provider = "gemini"
            elif openai_key:
                llm_provider = "chatgpt"

        settings = cls(
            llm_provider=llm_provider,
            google_ai_api_key=google_key,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            openai_api_key=openai_key,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            alpha_vantage_api_key=os.getenv("ALPHA_VANTAGE_API_KEY", ""),
            news_api_key=os.getenv("NEWS_API_KEY", ""),
            database_url=os.getenv("DATABASE_URL") or None,
            request_timeout=_float_env("REQUEST_TIMEOUT_SECONDS", 60.0),
            upstream_timeout=_float_env("UPSTREAM_TIMEOUT_SECONDS", 20.0),
            cors_allow_origins=[
                origin.strip()
                for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
                if origin.strip()
            ],
        )

        if settings.llm_provider:
            logger.info(f"🤖 Language model provider: {settings.llm_provider}")
        else:
            logger.warning("⚠️ No language model credential found (GOOGLE_AI_API_KEY / OPENAI_API_KEY)")
        if not settings.alpha_vantage_api_key:
            logger.info("📉 ALPHA_VANTAGE_API_KEY not set - financial data disabled")
        if not settings.news_api_key:
            logger.info("📰 NEWS_API_KEY not set - news search disabled")

        return settings
