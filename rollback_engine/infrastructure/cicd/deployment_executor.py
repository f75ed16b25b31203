"""
Interfaces to the deployment-execution engine.

``DeploymentExecutor`` puts an artifact set onto an environment and
``InfrastructureReverter`` restores an environment's prior infrastructure
definition.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from rollback_engine.domain.entities.artifact import Artifact


class DeploymentExecutor(ABC):
    @abstractmethod
    async def deploy(self, environment: str, artifact: Artifact) -> None:
        pass


class InfrastructureReverter(ABC):
    @abstractmethod
    async def revert(self, environment: str, version: str) -> None:
        pass


class InMemoryDeploymentExecutor(DeploymentExecutor):
    """Records deployments in call order."""

    def __init__(self):
        self.deployments: List[Tuple[str, str]] = []

    async def deploy(self, environment: str, artifact: Artifact) -> None:
        self.deployments.append((environment, artifact.version))


class InMemoryInfrastructureReverter(InfrastructureReverter):
    def __init__(self):
        self.reverts: List[Tuple[str, str]] = []

    async def revert(self, environment: str, version: str) -> None:
        self.reverts.append((environment, version))
