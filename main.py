"""
MacroLens - Macroeconomic Data Dashboard API

Resolves country + indicator + time window selections into normalized
{date, value} series from heterogeneous upstreams, and explains them.

Features:
- 3 upstream families: IMF SDMX 3.0, IMF DataMapper (WEO), World Bank WDI
- Key-variant resolution for SDMX dataflows with inconsistent key formats
- Fixed {meta, data, raw, attempts} envelope for every outcome
- 6-hour series cache with DataMapper -> SDMX fallback
- LLM chat explainer grounded in the chart's numbers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import config
from api import series_router, chat_router, health_router
from sources.http import close_async_client
from sources.manager import source_manager

logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("macrolens")


# =============================================================================
# STARTUP / SHUTDOWN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on the way up, close the HTTP pool on the way down."""
    logger.info("=" * 60)
    logger.info("MacroLens Starting Up")
    logger.info("IMF key: %s", 'SET' if config.imf_api_key else 'NOT SET')
    logger.info("LLM key: %s", 'SET' if config.anthropic_api_key else 'NOT SET')
    for family, status in source_manager.available_sources().items():
        logger.info("  %s: %s", family, status['name'])
    logger.info("Series cache TTL: %ss", config.series_cache_ttl)
    logger.info("=" * 60)
    yield
    await close_async_client()


# =============================================================================
# APP INITIALIZATION
# =============================================================================

app = FastAPI(
    title="MacroLens",
    description="Macroeconomic indicators from the IMF and World Bank",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS for the dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(series_router)
app.include_router(chat_router)
app.include_router(health_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything the resolver did not recover from locally."""
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": type(exc).__name__}
    )


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
