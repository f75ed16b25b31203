"""
Health check monitor.

Judges an environment healthy when none of its monitoring alarms is in the
ALARM state. INSUFFICIENT_DATA and OK never fail a check.
"""

import logging
from typing import Optional

from rollback_engine.domain.entities.health import HealthCheckResult
from rollback_engine.domain.errors import HealthCheckError
from rollback_engine.infrastructure.alarms.alarm_backend import AlarmBackend
from rollback_engine.utils.clock import AsyncioClock, Clock

logger = logging.getLogger(__name__)


class HealthCheckMonitor:
    def __init__(self, alarm_backend: AlarmBackend, clock: Optional[Clock] = None):
        self.alarm_backend = alarm_backend
        self.clock = clock or AsyncioClock()

    async def monitor_health_checks(self, environment: str) -> HealthCheckResult:
        """
        Read the current alarm states for an environment.

        Args:
            environment: Environment whose deployment alarms are checked

        Returns:
            HealthCheckResult listing every alarm in ALARM state

        Raises:
            HealthCheckError: If the alarm backend cannot be read
        """
        start = self.clock.monotonic()

        try:
            alarms = await self.alarm_backend.list_alarm_states(environment)
        except Exception as e:
            logger.error(f"❌ Health check for {environment} could not read alarms: {e}")
            raise HealthCheckError(f"Health check monitoring failed: {e}") from e

        failed_alarms = [alarm for alarm in alarms if alarm.state == "ALARM"]
        duration = self.clock.monotonic() - start

        if failed_alarms:
            names = ", ".join(alarm.name for alarm in failed_alarms)
            logger.warning(f"🚨 Health check failed for {environment}: {names}")
            return HealthCheckResult(
                success=False,
                failed_alarms=failed_alarms,
                duration=duration,
                reason=f"{len(failed_alarms)} alarm(s) in ALARM state: {names}",
            )

        logger.info(f"✅ Health check passed for {environment} ({len(alarms)} alarm(s) checked)")
        return HealthCheckResult(success=True, failed_alarms=[], duration=duration)
