import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from rollback_engine.domain.entities.deployment import DeploymentRecord, DeploymentStatus
from rollback_engine.domain.errors import HistoryStoreError
from rollback_engine.infrastructure.history.history_store import HistoryStore

logger = logging.getLogger(__name__)


class HttpHistoryStore(HistoryStore):
    """Client for a REST deployment-history service."""

    def __init__(self, base_url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self._base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _record_url(self, deployment_id: str) -> str:
        # Deployment ids contain '#', which must not end up as a URL fragment
        return f"{self._base_url}/deployments/{quote(deployment_id, safe='')}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise HistoryStoreError(
                f"History service returned HTTP {e.response.status_code} for {method} {url}"
            ) from e
        except httpx.HTTPError as e:
            raise HistoryStoreError(f"History service request failed: {e}") from e

    async def put(self, record: DeploymentRecord) -> None:
        await self._request(
            "POST", f"{self._base_url}/deployments", json=record.model_dump(mode="json")
        )

    async def update(self, deployment_id: str, changes: Dict[str, Any]) -> DeploymentRecord:
        payload = {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in changes.items()
        }
        response = await self._request("PATCH", self._record_url(deployment_id), json=payload)
        return DeploymentRecord.model_validate(response.json())

    async def list_records(
        self,
        environment: str,
        limit: int = 50,
        status: Optional[DeploymentStatus] = None,
    ) -> List[DeploymentRecord]:
        params: Dict[str, Any] = {"environment": environment, "order": "desc"}
        if limit > 0:
            params["limit"] = limit
        if status:
            params["status"] = status

        response = await self._request("GET", f"{self._base_url}/deployments", params=params)
        items = response.json().get("deployments", [])
        logger.debug(f"📋 History service returned {len(items)} record(s) for {environment}")
        return [DeploymentRecord.model_validate(item) for item in items]

    async def close(self):
        await self.client.aclose()
