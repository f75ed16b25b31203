"""
Rollback orchestration.

Two-level strategy for an unhealthy release:

1. Stage rollback: restore the failed environment to its previous version.
2. Full rollback: if that does not restore health, restore every environment
   to the last known-good version, production first.

Escalation is a one-shot fallback, never a retry loop. Every public method
returns a ``RollbackResult`` and never raises.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from rollback_engine.domain.entities.deployment import Deployment, DeploymentRecord, Environment
from rollback_engine.domain.entities.rollback import RollbackLevel, RollbackResult
from rollback_engine.domain.errors import ArtifactNotFoundError
from rollback_engine.domain.services.deployment_state_service import DeploymentStateStore
from rollback_engine.domain.services.health_monitor import HealthCheckMonitor
from rollback_engine.domain.services.notification_service import Notifier, Severity
from rollback_engine.infrastructure.artifacts.artifact_store import ArtifactStore
from rollback_engine.infrastructure.cicd.deployment_executor import (
    DeploymentExecutor,
    InfrastructureReverter,
)
from rollback_engine.utils.clock import AsyncioClock, Clock

logger = logging.getLogger(__name__)

STABILIZATION_INTERVAL_SECONDS = 60.0

# Highest blast radius first; staging and test follow production's restored state.
ENVIRONMENT_ROLLBACK_ORDER: Tuple[Environment, ...] = ("production", "staging", "test")

ARTIFACTS_NOT_FOUND = "Previous deployment artifacts not found"
NO_LAST_KNOWN_GOOD = "No last known good deployment found"


class RollbackOrchestrator:
    def __init__(
        self,
        artifact_store: ArtifactStore,
        deployment_executor: DeploymentExecutor,
        infrastructure_reverter: InfrastructureReverter,
        health_monitor: HealthCheckMonitor,
        state_store: DeploymentStateStore,
        notifier: Notifier,
        clock: Optional[Clock] = None,
        stabilization_interval: float = STABILIZATION_INTERVAL_SECONDS,
    ):
        self.artifact_store = artifact_store
        self.deployment_executor = deployment_executor
        self.infrastructure_reverter = infrastructure_reverter
        self.health_monitor = health_monitor
        self.state_store = state_store
        self.notifier = notifier
        self.clock = clock or AsyncioClock()
        self.stabilization_interval = stabilization_interval

    def _elapsed(self, start: float) -> float:
        return self.clock.monotonic() - start

    async def execute_rollback(self, deployment: Deployment, reason: str) -> RollbackResult:
        """
        Roll back a failed deployment, escalating from stage to full rollback.

        Args:
            deployment: The deployment judged unhealthy
            reason: Why the rollback was triggered

        Returns:
            RollbackResult with level "stage", "full", or "none" when nothing
            restored health
        """
        start = self.clock.monotonic()
        logger.info(
            f"⏪ Starting rollback of {deployment.deployment_id} "
            f"({deployment.environment}, {deployment.version}): {reason}"
        )

        try:
            await self._notify_initiated(deployment, reason)

            logger.info(f"🔄 Attempting stage rollback of {deployment.environment}")
            stage_result = await self.rollback_stage(deployment)

            if stage_result.success:
                duration = self._elapsed(start)
                logger.info(f"✅ Stage rollback of {deployment.environment} succeeded in {duration:.1f}s")
                await self._notify_succeeded(deployment, "stage", duration)
                return RollbackResult(success=True, level="stage", duration=duration)

            logger.warning(f"⚠️ Stage rollback failed, attempting full rollback: {stage_result.reason}")
            full_result = await self.rollback_full(deployment)

            if full_result.success:
                duration = self._elapsed(start)
                logger.info(f"✅ Full rollback succeeded in {duration:.1f}s")
                await self._notify_succeeded(deployment, "full", duration)
                return RollbackResult(success=True, level="full", duration=duration)

            duration = self._elapsed(start)
            failure = (
                f"Stage rollback failed: {stage_result.reason}; "
                f"Full rollback failed: {full_result.reason}"
            )
            logger.error(f"❌ All rollback attempts failed after {duration:.1f}s: {failure}")
            await self._notify_failed(deployment, failure)
            return RollbackResult(success=False, level="none", duration=duration, reason=failure)

        except Exception as e:
            duration = self._elapsed(start)
            failure = f"Unexpected error: {e}"
            logger.exception(f"💥 Rollback orchestration failed after {duration:.1f}s")
            await self._notify_failed(deployment, failure)
            return RollbackResult(success=False, level="none", duration=duration, reason=failure)

    async def rollback_stage(self, deployment: Deployment) -> RollbackResult:
        """Restore the deployment's own environment to ``previous_version``."""
        start = self.clock.monotonic()
        try:
            failure = await self._restore_environment(
                deployment.environment,
                deployment.previous_version,
                deployment.infrastructure_changed,
            )
        except Exception as e:
            logger.error(f"❌ Stage rollback of {deployment.environment} raised: {e}")
            failure = f"Unexpected error: {e}"

        return self._result("stage", start, failure)

    async def rollback_full(self, deployment: Deployment) -> RollbackResult:
        """Restore every environment, in ENVIRONMENT_ROLLBACK_ORDER, to the last known-good version."""
        start = self.clock.monotonic()
        try:
            last_known_good = await self._get_last_known_good_deployment()
            if last_known_good is None:
                logger.error(f"❌ {NO_LAST_KNOWN_GOOD}")
                return self._result("full", start, NO_LAST_KNOWN_GOOD)

            for environment in ENVIRONMENT_ROLLBACK_ORDER:
                logger.info(f"🔄 Rolling back {environment} to {last_known_good.version}")
                failure = await self._restore_environment(
                    environment,
                    last_known_good.version,
                    deployment.infrastructure_changed,
                )
                if failure is not None:
                    # Partial full rollback is terminal; remaining environments are left alone
                    return self._result("full", start, f"Failed to rollback {environment}: {failure}")

            return self._result("full", start, None)

        except Exception as e:
            logger.error(f"❌ Full rollback raised: {e}")
            return self._result("full", start, f"Unexpected error: {e}")

    async def validate_rollback(self, environment: str) -> RollbackResult:
        """Wait for the environment to stabilize, then judge it by its alarms."""
        logger.info(f"⏳ Waiting {self.stabilization_interval:.0f}s for {environment} to stabilize")
        await self.clock.sleep(self.stabilization_interval)

        try:
            health = await self.health_monitor.monitor_health_checks(environment)
        except Exception as e:
            logger.error(f"❌ Validation of {environment} raised: {e}")
            return RollbackResult(success=False, level="stage", reason=f"Unexpected error: {e}")

        if not health.success:
            return RollbackResult(
                success=False,
                level="stage",
                duration=health.duration,
                reason=health.reason or "Health checks failed",
            )
        return RollbackResult(success=True, level="stage", duration=health.duration)

    async def _restore_environment(
        self,
        environment: str,
        target_version: Optional[str],
        infrastructure_changed: bool,
    ) -> Optional[str]:
        """Put ``target_version`` back on ``environment`` and validate it. Returns the failure reason, if any."""
        try:
            artifact = await self.artifact_store.fetch(environment, target_version)
        except ArtifactNotFoundError as e:
            logger.warning(f"⚠️ {e}")
            return ARTIFACTS_NOT_FOUND

        if infrastructure_changed:
            logger.info(f"🏗️ Reverting infrastructure of {environment} to {target_version}")
            await self.infrastructure_reverter.revert(environment, artifact.version)

        logger.info(f"📦 Redeploying {artifact.location} to {environment}")
        await self.deployment_executor.deploy(environment, artifact)

        validation = await self.validate_rollback(environment)
        return None if validation.success else validation.reason

    async def _get_last_known_good_deployment(self) -> Optional[DeploymentRecord]:
        for environment in ENVIRONMENT_ROLLBACK_ORDER:
            record = await self.state_store.get_last_known_good_deployment(environment)
            if record is not None:
                logger.info(f"📌 Last known good deployment: {record.deployment_id} ({record.version})")
                return record
        return None

    def _result(self, level: RollbackLevel, start: float, failure: Optional[str]) -> RollbackResult:
        return RollbackResult(
            success=failure is None,
            level=level,
            duration=self._elapsed(start),
            reason=failure,
        )

    async def _notify_initiated(self, deployment: Deployment, reason: str) -> None:
        await self.notifier.notify(
            Severity.WARNING,
            f"Rollback Initiated - {deployment.environment}",
            f"Rollback initiated for {deployment.environment} "
            f"(version {deployment.version}). Reason: {reason}",
            {
                "event": "rollback_initiated",
                "deployment_id": deployment.deployment_id,
                "environment": deployment.environment,
                "current_version": deployment.version,
                "target_version": deployment.previous_version or "unknown",
                "pipeline_execution_id": deployment.pipeline_execution_id,
                "reason": reason,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    async def _notify_succeeded(self, deployment: Deployment, level: RollbackLevel, duration: float) -> None:
        await self.notifier.notify(
            Severity.INFO,
            f"Rollback Succeeded - {deployment.environment}",
            f"{level.capitalize()} rollback of {deployment.environment} succeeded in {duration:.1f}s.",
            {
                "event": "rollback_succeeded",
                "deployment_id": deployment.deployment_id,
                "environment": deployment.environment,
                "level": level,
                "version": deployment.previous_version or "unknown",
                "pipeline_execution_id": deployment.pipeline_execution_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    async def _notify_failed(self, deployment: Deployment, reason: str) -> None:
        await self.notifier.notify(
            Severity.CRITICAL,
            f"Rollback Failed - {deployment.environment}",
            f"Rollback of {deployment.environment} failed. Manual intervention required. Reason: {reason}",
            {
                "event": "rollback_failed",
                "deployment_id": deployment.deployment_id,
                "environment": deployment.environment,
                "version": deployment.version,
                "pipeline_execution_id": deployment.pipeline_execution_id,
                "reason": reason,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
