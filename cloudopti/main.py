"""
Main FastAPI application bootstrap.
Configures middleware and includes routers.
"""
import logging

from fastapi import FastAPI

from cloudopti.core.config import config
from cloudopti.api.recommendations import router as recommendations_router
from cloudopti.middleware.request_size_limiter import RequestSizeLimiterMiddleware


logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    # Fail fast with a clear message
    raise RuntimeError(f"Configuration error: {error}") from error

logger.info(
    "Recommendation engine configured: default_region=%s, default_max_budget=%s, providers=%s",
    config.DEFAULT_REGION,
    config.DEFAULT_MAX_BUDGET,
    ",".join(config.PROVIDERS)
)


app = FastAPI(
    title="Cloud Opti",
    description="Cloud architecture recommendations with cost estimates",
)

# Add request size limiting middleware
app.add_middleware(RequestSizeLimiterMiddleware)

# Include routers
app.include_router(recommendations_router)
