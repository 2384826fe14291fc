"""
MacroLens - Centralized Configuration

All environment variables, endpoints, and settings in one place.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # API Keys
    imf_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Upstream endpoints
    sdmx_base_url: str = "https://api.imf.org/external/sdmx/3.0"
    sdmx_agency: str = "IMF"
    sdmx_version: str = "latest"
    datamapper_base_url: str = "https://www.imf.org/external/datamapper/api/v1"
    worldbank_base_url: str = "https://api.worldbank.org/v2"

    # Transport (the resolver itself enforces no timeout)
    http_timeout: float = 15.0

    # Cache settings
    series_cache_ttl: int = 21600      # 6 hours
    series_cache_size: int = 5000

    # LLM settings
    default_model: str = "claude-sonnet-4-20250514"
    chat_max_tokens: int = 1024

    # Behaviour
    enable_family_fallback: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            imf_api_key=os.environ.get('IMF_API_KEY') or os.environ.get('CHART_API_KEY'),
            anthropic_api_key=os.environ.get('ANTHROPIC_API_KEY') or os.environ.get('LLM_API_KEY'),

            sdmx_base_url=os.environ.get('SDMX_BASE_URL', cls.sdmx_base_url).rstrip('/'),
            sdmx_agency=os.environ.get('SDMX_AGENCY', cls.sdmx_agency),
            sdmx_version=os.environ.get('SDMX_VERSION', cls.sdmx_version),
            datamapper_base_url=os.environ.get('DATAMAPPER_BASE_URL', cls.datamapper_base_url).rstrip('/'),
            worldbank_base_url=os.environ.get('WORLDBANK_BASE_URL', cls.worldbank_base_url).rstrip('/'),

            http_timeout=float(os.environ.get('HTTP_TIMEOUT', 15.0)),
            series_cache_ttl=int(os.environ.get('SERIES_CACHE_TTL', 21600)),
            series_cache_size=int(os.environ.get('SERIES_CACHE_SIZE', 5000)),
            default_model=os.environ.get('DEFAULT_MODEL', cls.default_model),
            enable_family_fallback=os.environ.get('ENABLE_FAMILY_FALLBACK', 'true').lower() != 'false',  # On by default
            log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        )


# Global config instance
config = Config.from_env()


# Datasets that only publish annual observations
ANNUAL_ONLY_DATASETS = {'WEO', 'WORLDBANK'}
