"""Exceptions raised by rollback collaborators.

Collaborators raise these; ``RollbackOrchestrator`` is the single boundary
that turns them into failed ``RollbackResult`` values.
"""

from typing import Optional

from rollback_engine.domain.entities.rollback import RollbackResult


class RollbackEngineError(Exception):
    """Base class for all rollback engine errors."""


class ArtifactNotFoundError(RollbackEngineError):
    def __init__(self, environment: str, version: Optional[str]):
        self.environment = environment
        self.version = version
        super().__init__(f"Artifacts for version {version} not found ({environment})")


class ArtifactStoreError(RollbackEngineError):
    pass


class AlarmBackendError(RollbackEngineError):
    pass


class HealthCheckError(RollbackEngineError):
    """The alarm states needed for a health check could not be read."""


class HistoryStoreError(RollbackEngineError):
    pass


class DeploymentExecutionError(RollbackEngineError):
    pass


class NotificationError(RollbackEngineError):
    pass


class RollbackError(RollbackEngineError):
    """A rollback ran to completion but did not restore health."""

    def __init__(self, message: str, deployment_id: str, result: Optional[RollbackResult] = None):
        super().__init__(message)
        self.deployment_id = deployment_id
        self.result = result
