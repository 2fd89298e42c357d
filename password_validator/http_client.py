"""Shared outbound HTTP client for identity lookups and programmatic rules."""

from typing import Optional

import httpx

from password_validator.config import get_settings
from password_validator.logging_config import get_logger

logger = get_logger(__name__)

# Global HTTP client
_http_client: Optional[httpx.AsyncClient] = None


def create_http_client() -> httpx.AsyncClient:
    """Create a client whose timeouts bound every remote call."""
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.lookup_timeout_seconds),
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
    )


def get_http_client() -> httpx.AsyncClient:
    """Get the global HTTP client instance."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = create_http_client()
    return _http_client


async def init_http_client() -> None:
    """Initialize the HTTP client on application startup."""
    get_http_client()
    logger.info("HTTP client initialized", timeout_ms=get_settings().lookup_timeout_ms)


async def close_http_client() -> None:
    """Close the HTTP client on application shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
