from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Set

from rollback_engine.domain.entities.artifact import Artifact
from rollback_engine.domain.errors import ArtifactNotFoundError


def artifact_key(version: str) -> str:
    return f"artifacts/{version}/artifact.zip"


class ArtifactStore(ABC):
    @abstractmethod
    async def fetch(self, environment: str, version: Optional[str]) -> Artifact:
        """
        Locate the deployable artifact set for a version.

        Raises:
            ArtifactNotFoundError: If no artifact exists for the version
            ArtifactStoreError: If the store cannot be reached
        """
        pass


class InMemoryArtifactStore(ArtifactStore):
    def __init__(self, versions: Optional[Iterable[str]] = None, bucket: str = "memory://artifacts"):
        self._versions: Set[str] = set(versions or [])
        self._bucket = bucket
        self.fetches: list[tuple[str, Optional[str]]] = []

    def add(self, version: str) -> None:
        self._versions.add(version)

    async def fetch(self, environment: str, version: Optional[str]) -> Artifact:
        self.fetches.append((environment, version))
        if not version or version not in self._versions:
            raise ArtifactNotFoundError(environment, version)
        return Artifact(
            version=version,
            environment=environment,
            location=f"{self._bucket}/{artifact_key(version)}",
        )
