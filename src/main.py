"""Pantry Tracker - pantry inventory with a conversational assistant."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.agents.completion_provider import build_completion_provider
from src.core.config import settings
from src.core.db_client import close_connection
from src.core.logging import configure_logfire, instrument_fastapi, instrument_pydantic_ai
from src.core.schema import init_db
from src.interface.chat_router import router as chat_router
from src.interface.pantry_router import router as pantry_router


logger = logging.getLogger(__name__)


def validate_startup_configuration(app: FastAPI) -> None:
    """Validate required credentials and build the completion provider.

    Exits the process with a clear message if a credential is missing.
    """
    logger.info("startup_validation_begin")

    try:
        app.state.completion_provider = build_completion_provider(settings)
        logger.info("startup_validation", extra={"stage": "credentials", "status": "ok"})
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so validation logs are captured
    configure_logfire()

    validate_startup_configuration(app)

    await init_db()
    logger.info("Database initialized")

    instrument_pydantic_ai()
    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="pantry-tracker",
    description="Pantry inventory with a conversational assistant",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(chat_router)
app.include_router(pantry_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
