"""
Alarm event processing.

Turns an alarm state-change event into a rollback of the deployment that is
currently rolling out in the alarm's environment.
"""

import logging
from typing import List, Optional

from rollback_engine.domain.entities.deployment import ENVIRONMENTS, Deployment, Environment
from rollback_engine.domain.entities.rollback import RollbackResult
from rollback_engine.domain.errors import RollbackError
from rollback_engine.domain.services.deployment_state_service import DeploymentStateStore
from rollback_engine.domain.services.rollback_service import RollbackOrchestrator
from rollback_engine.schemas.alarm import AlarmEvent

logger = logging.getLogger(__name__)

RECENT_DEPLOYMENTS_LIMIT = 10


class AlarmEventProcessor:
    def __init__(
        self,
        orchestrator: RollbackOrchestrator,
        state_store: DeploymentStateStore,
        environment_prefixes: List[str],
    ):
        self.orchestrator = orchestrator
        self.state_store = state_store
        self.environment_prefixes = environment_prefixes

    async def process_alarm_event(self, event: AlarmEvent) -> Optional[RollbackResult]:
        """
        Roll back the active deployment when a deployment alarm fires.

        Args:
            event: Alarm state-change event

        Returns:
            The rollback result, or None when the event does not call for a rollback

        Raises:
            RollbackError: If the rollback ran but did not succeed
            HistoryStoreError: If the rollback outcome cannot be recorded
        """
        logger.info(f"🔔 Processing alarm event {event.alarm_name} -> {event.state}")

        if event.state != "ALARM":
            logger.info(f"Ignoring {event.state} state for {event.alarm_name}")
            return None

        environment = self.extract_environment(event.alarm_name)
        if environment is None:
            logger.info(f"Ignoring non-deployment alarm {event.alarm_name}")
            return None

        deployment = await self._get_current_deployment(environment)
        if deployment is None:
            logger.warning(f"⚠️ No active deployment in {environment} for alarm {event.alarm_name}")
            return None

        logger.info(f"⏪ Triggering rollback of {deployment.deployment_id} for alarm {event.alarm_name}")
        reason = f"Alarm {event.alarm_name} in ALARM state - {event.reason}"
        result = await self.orchestrator.execute_rollback(deployment, reason)
        await self._record_outcome(deployment, reason, result)

        if not result.success:
            raise RollbackError(
                f"Rollback failed: {result.reason}",
                deployment_id=deployment.deployment_id,
                result=result,
            )

        logger.info(f"✅ Rollback of {deployment.deployment_id} completed ({result.level})")
        return result

    def extract_environment(self, alarm_name: str) -> Optional[Environment]:
        """Environment of a deployment alarm; prefixes look like ``{project}-{environment}``."""
        for prefix in self.environment_prefixes:
            if alarm_name.startswith(prefix):
                environment = prefix.rsplit("-", 1)[-1]
                if environment in ENVIRONMENTS:
                    return environment
        return None

    async def _record_outcome(self, deployment: Deployment, reason: str, result: RollbackResult) -> None:
        # A record left in_progress would be rolled back again by the next alarm
        if result.success:
            await self.state_store.update_deployment_status(
                deployment.deployment_id,
                "rolled_back",
                rollback_level=result.level,
                rollback_reason=reason,
            )
        else:
            await self.state_store.update_deployment_status(
                deployment.deployment_id,
                "failed",
                rollback_reason=result.reason,
            )

    async def _get_current_deployment(self, environment: Environment) -> Optional[Deployment]:
        history = await self.state_store.get_deployment_history(environment, limit=RECENT_DEPLOYMENTS_LIMIT)
        active = next((record for record in history if record.status == "in_progress"), None)
        if active is None:
            return None

        last_known_good = await self.state_store.get_last_known_good_deployment(environment)
        previous_version = last_known_good.version if last_known_good else None
        return active.to_deployment(previous_version=previous_version)
