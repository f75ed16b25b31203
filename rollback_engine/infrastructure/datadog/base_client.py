"""Base Datadog client with common functionality."""
import httpx
import logging
from typing import Dict, Optional
from rollback_engine.config import settings

logger = logging.getLogger(__name__)


class BaseDatadogClient:
    """Base class for Datadog API clients with common functionality."""

    def __init__(
        self,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        app_key: Optional[str] = None,
        site: Optional[str] = None,
    ):
        """Initialize the HTTP client. Keys and site default to the global settings."""
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._api_key = api_key or settings.DATADOG_API_KEY
        self._app_key = app_key or settings.DATADOG_APP_KEY
        self._base_url = f"https://api.{site or settings.DATADOG_SITE}"

    def _get_headers(self, content_type: Optional[str] = "application/json") -> Dict[str, str]:
        """Get standard Datadog API headers."""
        headers = {
            "DD-API-KEY": self._api_key or "",
        }
        if content_type:
            headers["Content-Type"] = content_type
        if self._app_key:
            headers["DD-APPLICATION-KEY"] = self._app_key
        return headers

    def _is_api_available(self) -> bool:
        """Check if API keys are available."""
        return bool(self._api_key and self._app_key)

    async def _make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make HTTP request with error handling."""
        try:
            response = await self.client.request(method, url, **kwargs)
            return response
        except Exception as e:
            logger.error(f"HTTP request failed: {e}")
            raise

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
