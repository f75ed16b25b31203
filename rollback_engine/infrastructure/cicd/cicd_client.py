import logging
from typing import Any, Dict, Optional

import httpx

from rollback_engine.domain.entities.artifact import Artifact
from rollback_engine.domain.errors import DeploymentExecutionError
from rollback_engine.infrastructure.cicd.deployment_executor import (
    DeploymentExecutor,
    InfrastructureReverter,
)

logger = logging.getLogger(__name__)


class CICDClient(DeploymentExecutor, InfrastructureReverter):
    """HTTP client for the CI/CD deployment engine."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def deploy(self, environment: str, artifact: Artifact) -> None:
        """Start a deployment of an existing artifact to an environment."""
        payload = {
            "environment": environment,
            "version": artifact.version,
            "artifact_location": artifact.location,
            "trigger": "rollback",
        }
        await self._post("/deployments", payload, f"deploy {artifact.version} to {environment}")

    async def revert(self, environment: str, version: str) -> None:
        """Re-apply the infrastructure definition shipped with a previous version."""
        payload = {"environment": environment, "version": version}
        await self._post(
            "/infrastructure/revert", payload, f"revert infrastructure of {environment} to {version}"
        )

    async def _post(self, path: str, payload: Dict[str, Any], action: str) -> Dict[str, Any]:
        logger.info(f"🚀 Requesting CI/CD to {action}")
        try:
            response = await self.client.post(
                f"{self._base_url}{path}", json=payload, headers=self._get_headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeploymentExecutionError(
                f"Failed to {action}: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DeploymentExecutionError(f"Failed to {action}: {e}") from e

        logger.info(f"✅ CI/CD accepted request to {action}")
        return response.json() if response.content else {}

    async def close(self):
        await self.client.aclose()
