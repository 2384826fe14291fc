"""API module - FastAPI routers and endpoints."""

from .series import series_router
from .chat import chat_router
from .health import health_router

__all__ = ['series_router', 'chat_router', 'health_router']
