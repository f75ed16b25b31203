"""
Deployment history storage interface.

Records are ordered by recency of insertion. "Most recent" never depends on
wall-clock timestamps, so two records started in the same millisecond keep
the order in which they were written.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from rollback_engine.domain.entities.deployment import DeploymentRecord, DeploymentStatus
from rollback_engine.domain.errors import HistoryStoreError


class HistoryStore(ABC):
    @abstractmethod
    async def put(self, record: DeploymentRecord) -> None:
        pass

    @abstractmethod
    async def update(self, deployment_id: str, changes: Dict[str, Any]) -> DeploymentRecord:
        pass

    @abstractmethod
    async def list_records(
        self,
        environment: str,
        limit: int = 50,
        status: Optional[DeploymentStatus] = None,
    ) -> List[DeploymentRecord]:
        """Records for an environment, most recent first."""
        pass

    async def query(
        self,
        environment: str,
        status: DeploymentStatus = "succeeded",
        most_recent: bool = True,
    ) -> Optional[DeploymentRecord]:
        if most_recent:
            records = await self.list_records(environment, limit=1, status=status)
            return records[0] if records else None
        records = await self.list_records(environment, limit=0, status=status)
        return records[-1] if records else None


class InMemoryHistoryStore(HistoryStore):
    def __init__(self, records: Optional[List[DeploymentRecord]] = None):
        # Insertion order is recency order
        self._records: List[DeploymentRecord] = []
        for record in records or []:
            self._records.append(record)

    async def put(self, record: DeploymentRecord) -> None:
        for index, existing in enumerate(self._records):
            if existing.deployment_id == record.deployment_id:
                self._records[index] = record
                return
        self._records.append(record)

    async def update(self, deployment_id: str, changes: Dict[str, Any]) -> DeploymentRecord:
        for index, existing in enumerate(self._records):
            if existing.deployment_id == deployment_id:
                updated = existing.model_copy(update=changes)
                self._records[index] = updated
                return updated
        raise HistoryStoreError(f"Deployment {deployment_id} not found")

    async def list_records(
        self,
        environment: str,
        limit: int = 50,
        status: Optional[DeploymentStatus] = None,
    ) -> List[DeploymentRecord]:
        matches = [
            record
            for record in reversed(self._records)
            if record.environment == environment and (status is None or record.status == status)
        ]
        # limit <= 0 means no limit
        return matches[:limit] if limit > 0 else matches
