"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vct_builder.config import settings
from vct_builder.api.routes.roster import ROSTER_PATH, router as roster_router
from vct_builder.errors import ConfigurationError, ValidationError
from vct_builder.services.bedrock_client import BedrockRosterClient
from vct_builder.services.news_client import get_news_client
from vct_builder.services.roster_service import RosterService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_bedrock_client() -> BedrockRosterClient | None:
    """Build the shared Bedrock client, or None if configuration is missing.

    A missing client is not fatal for the process; each roster request
    answers with a configuration error instead.
    """
    try:
        return BedrockRosterClient.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Bedrock client not configured: {e.message}")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: build shared clients once per process
    if not hasattr(app.state, "roster_service"):
        app.state.roster_service = RosterService.from_settings(settings, create_bedrock_client())
    if not hasattr(app.state, "news_client"):
        app.state.news_client = get_news_client(settings)
    yield
    # Shutdown: release connections
    await app.state.news_client.close()
    client = app.state.roster_service.client
    if client is not None:
        client.close()


app = FastAPI(
    title="VCT Team Builder",
    description="Valorant roster builder backed by AWS Bedrock",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed roster requests with the pipeline's 400 error body."""
    if request.url.path == ROSTER_PATH:
        error = ValidationError(f"Invalid roster request: {exc.errors()}")
        logger.info(f"{error.kind.value}: {error.message}")
        return JSONResponse(error.to_dict(), status_code=error.status_code)
    return await request_validation_exception_handler(request, exc)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "vct-team-builder"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "VCT Team Builder API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(roster_router)
