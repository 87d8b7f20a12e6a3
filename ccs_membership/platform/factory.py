"""
Platform client factory.

Returns the PlatformClient configured from application settings. The
instance is cached per base URL so the underlying httpx connection pool is
reused across requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ccs_membership.platform.http_client import PlatformClient

if TYPE_CHECKING:
    from ccs_membership.config import Settings

logger = logging.getLogger(__name__)

# Module-level cache: base_url -> instance
_client_cache: dict[str, PlatformClient] = {}


def get_platform_client(settings: Settings | None = None) -> PlatformClient:
    """Return a PlatformClient for the configured hosting platform.

    Raises:
        ValueError: If PLATFORM_API_BASE_URL or PLATFORM_API_KEY is missing.
    """
    if settings is None:
        from ccs_membership.config import get_settings

        settings = get_settings()

    base_url = settings.platform_api_base_url
    if not base_url:
        raise ValueError(
            "PLATFORM_API_BASE_URL is required. Set it in your environment or .env file."
        )
    if not settings.platform_api_key:
        raise ValueError(
            "PLATFORM_API_KEY is required. Set it in your environment or .env file."
        )

    if base_url in _client_cache:
        return _client_cache[base_url]

    client = PlatformClient(
        base_url=base_url,
        api_key=settings.platform_api_key,
        timeout=settings.platform_timeout,
    )
    _client_cache[base_url] = client
    logger.info("Created platform client: base_url=%s timeout=%.1fs", base_url, settings.platform_timeout)
    return client


def clear_platform_cache() -> None:
    """Close and drop cached clients. Useful for testing."""
    for client in _client_cache.values():
        client.close()
    _client_cache.clear()
