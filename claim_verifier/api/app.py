"""FastAPI application for the claim verification service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file
load_dotenv()

from ..domain.ports.ai_provider import ProviderConfigurationError
from ..infrastructure.dependencies import get_service_container
from .endpoints import health, verify_claim

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    yield  # Application runs here

    # Shutdown: release provider clients and the cache engine
    await get_service_container().shutdown()


# Create FastAPI application
app = FastAPI(
    title="Claim Verifier API",
    description="Claim verification with evidence gathering, grounded verdicts and freshness analysis",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_service_container().settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Include routers
app.include_router(health.router)
app.include_router(verify_claim.router)


@app.exception_handler(ProviderConfigurationError)
async def configuration_error_handler(request: Request, exc: ProviderConfigurationError) -> JSONResponse:
    """Surface missing credentials as a genuine server error."""
    logger.error(f"❌ Configuration error: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})
