from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Environment = Literal["test", "staging", "production"]
DeploymentStatus = Literal["in_progress", "succeeded", "failed", "rolled_back"]

ENVIRONMENTS = ("test", "staging", "production")


class Deployment(BaseModel):
    """The release under rollback consideration. Frozen for one rollback attempt."""

    model_config = ConfigDict(frozen=True)

    deployment_id: str
    environment: Environment
    version: str
    previous_version: Optional[str] = None
    infrastructure_changed: bool = False
    pipeline_execution_id: str = ""


class DeploymentInfo(BaseModel):
    """What the pipeline knows when a deployment starts."""

    environment: Environment
    commit_sha: str
    commit_message: str = ""
    commit_author: str = ""
    pipeline_execution_id: str = ""
    artifact_location: str = ""
    infrastructure_changed: bool = False


class PipelineTestResults(BaseModel):
    unit_tests_passed: bool = False
    integration_tests_passed: bool = False
    e2e_tests_passed: bool = False
    coverage_percentage: float = 0.0


class DeploymentRecord(BaseModel):
    deployment_id: str
    environment: Environment
    version: str
    status: DeploymentStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    infrastructure_changed: bool = False
    pipeline_execution_id: str = ""
    artifact_location: str = ""
    commit_message: str = ""
    commit_author: str = ""
    unit_tests_passed: bool = False
    integration_tests_passed: bool = False
    e2e_tests_passed: bool = False
    coverage_percentage: float = 0.0
    rollback_reason: Optional[str] = None
    rollback_level: Optional[Literal["stage", "full"]] = None
    rollback_time: Optional[datetime] = None
    expires_at: Optional[int] = None

    def to_deployment(self, previous_version: Optional[str] = None) -> Deployment:
        return Deployment(
            deployment_id=self.deployment_id,
            environment=self.environment,
            version=self.version,
            previous_version=previous_version,
            infrastructure_changed=self.infrastructure_changed,
            pipeline_execution_id=self.pipeline_execution_id,
        )
