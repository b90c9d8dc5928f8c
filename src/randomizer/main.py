"""FastAPI entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from randomizer.auth import get_token_provider
from randomizer.config import get_settings, validate_settings_for_env
from randomizer.logging import configure_logging
from randomizer.routes.health import router as health_router
from randomizer.slack.router import limiter
from randomizer.slack.router import router as slack_router
from randomizer.store.factory import get_store_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    validate_settings_for_env(settings)
    configure_logging(settings.log_level)
    # Build the process-wide token cache and store factory once, up front.
    provider = get_token_provider()
    logger.info("Slack token source: %s", provider.source)
    get_store_factory()
    logger.info("Group store backend: %s", settings.store_backend)
    yield


app = FastAPI(title="Randomizer", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"error": "rate limit exceeded", "detail": str(exc.detail)},
    )


app.include_router(health_router)
app.include_router(slack_router)
