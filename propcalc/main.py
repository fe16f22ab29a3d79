"""
Main FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from propcalc import __version__
from propcalc.api import router as api_router
from propcalc.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="UK property investment metrics: yields, lender stress, tax and levies",
    version=__version__,
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")

logger.info(f"{settings.app_name} starting in {settings.app_env} mode")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("propcalc.main:app", host=settings.host, port=settings.port)
