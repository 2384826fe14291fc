"""
Health Check and Utility Endpoints
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cache import series_cache
from config import config
from sources.manager import source_manager

health_router = APIRouter()

VERSION = "1.0.0"


@health_router.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return JSONResponse({
        "status": "healthy",
        "version": VERSION
    })


@health_router.get("/api/status")
async def api_status():
    """Detailed API status with source availability and cache stats."""
    return JSONResponse({
        "status": "healthy",
        "version": VERSION,
        "config": {
            "imf_api_configured": bool(config.imf_api_key),
            "llm_api_configured": bool(config.anthropic_api_key),
            "family_fallback_enabled": config.enable_family_fallback,
            "sdmx_base_url": config.sdmx_base_url,
        },
        "data_sources": source_manager.available_sources(),
        "cache": series_cache.stats(),
    })


@health_router.get("/api/cache/clear")
async def clear_cache():
    """Clear the series cache (admin endpoint)."""
    series_cache.clear()
    return JSONResponse({
        "status": "success",
        "message": "Series cache cleared"
    })


@health_router.get("/api/sources")
async def list_sources():
    """List all available data sources."""
    return JSONResponse({
        "sources": source_manager.available_sources()
    })
