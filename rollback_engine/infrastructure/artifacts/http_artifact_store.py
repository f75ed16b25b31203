import logging
from typing import Optional

import httpx

from rollback_engine.domain.entities.artifact import Artifact
from rollback_engine.domain.errors import ArtifactNotFoundError, ArtifactStoreError
from rollback_engine.infrastructure.artifacts.artifact_store import ArtifactStore, artifact_key

logger = logging.getLogger(__name__)


class HttpArtifactStore(ArtifactStore):
    """Artifact store served over HTTP, e.g. an S3 bucket website or an artifact repository."""

    def __init__(self, base_url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self._base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, environment: str, version: Optional[str]) -> Artifact:
        if not version:
            raise ArtifactNotFoundError(environment, version)

        location = f"{self._base_url}/{artifact_key(version)}"
        logger.info(f"📦 Looking up artifact {location}")

        try:
            response = await self.client.head(location)
        except httpx.HTTPError as e:
            raise ArtifactStoreError(f"Artifact lookup failed for {version}: {e}") from e

        if response.status_code in (403, 404):
            logger.warning(f"⚠️ Artifact for version {version} not found ({response.status_code})")
            raise ArtifactNotFoundError(environment, version)
        if response.status_code >= 400:
            raise ArtifactStoreError(
                f"Artifact lookup failed for {version}: HTTP {response.status_code}"
            )

        return Artifact(version=version, environment=environment, location=location)

    async def close(self):
        await self.client.aclose()
