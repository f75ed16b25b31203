import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from rollback_engine.domain.entities.deployment import (
    DeploymentInfo,
    DeploymentRecord,
    DeploymentStatus,
    Environment,
    PipelineTestResults,
)
from rollback_engine.domain.errors import HistoryStoreError
from rollback_engine.infrastructure.history.history_store import HistoryStore

logger = logging.getLogger(__name__)

RECORD_RETENTION = timedelta(days=90)


class DeploymentStateStore:
    """Deployment history: the pipeline writes it, rollbacks read it."""

    def __init__(self, history_store: HistoryStore):
        self.history_store = history_store

    async def get_last_known_good_deployment(self, environment: Environment) -> Optional[DeploymentRecord]:
        """Most recent succeeded deployment for an environment, or None when there is no history."""
        try:
            record = await self.history_store.query(environment, status="succeeded", most_recent=True)
        except HistoryStoreError:
            raise
        except Exception as e:
            raise HistoryStoreError(
                f"Failed to get last known good deployment for {environment}: {e}"
            ) from e

        if record is None:
            logger.info(f"📭 No last known good deployment for {environment}")
        return record

    async def record_deployment_start(self, info: DeploymentInfo) -> DeploymentRecord:
        now = datetime.now(timezone.utc)
        deployment_id = f"{info.environment}#{int(now.timestamp() * 1000)}"
        record = DeploymentRecord(
            deployment_id=deployment_id,
            environment=info.environment,
            version=info.commit_sha,
            status="in_progress",
            start_time=now,
            infrastructure_changed=info.infrastructure_changed,
            pipeline_execution_id=info.pipeline_execution_id,
            artifact_location=info.artifact_location,
            commit_message=info.commit_message,
            commit_author=info.commit_author,
            expires_at=int((now + RECORD_RETENTION).timestamp()),
        )

        try:
            await self.history_store.put(record)
        except Exception as e:
            raise HistoryStoreError(f"Failed to record deployment start for {deployment_id}: {e}") from e

        logger.info(f"📝 Recorded deployment {deployment_id} ({info.commit_sha})")
        return record

    async def update_deployment_status(
        self,
        deployment_id: str,
        status: DeploymentStatus,
        test_results: Optional[PipelineTestResults] = None,
        rollback_level: Optional[str] = None,
        rollback_reason: Optional[str] = None,
    ) -> DeploymentRecord:
        """
        Close out a deployment record.

        Passing a rollback level or reason also stamps ``rollback_time``, which
        marks the record as handled by a rollback.
        """
        now = datetime.now(timezone.utc)
        changes = {"status": status, "end_time": now}
        if test_results:
            changes.update(test_results.model_dump())
        if rollback_level or rollback_reason:
            changes.update(
                rollback_level=rollback_level,
                rollback_reason=rollback_reason,
                rollback_time=now,
            )

        try:
            record = await self.history_store.update(deployment_id, changes)
        except Exception as e:
            raise HistoryStoreError(f"Failed to update deployment status for {deployment_id}: {e}") from e

        logger.info(f"📝 Deployment {deployment_id} is now {status}")
        return record

    async def get_deployment_history(self, environment: Environment, limit: int = 50) -> List[DeploymentRecord]:
        try:
            return await self.history_store.list_records(environment, limit=limit)
        except Exception as e:
            raise HistoryStoreError(f"Failed to get deployment history for {environment}: {e}") from e
