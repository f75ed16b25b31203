"""Alarm backend reading Datadog monitor states."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from rollback_engine.domain.entities.health import AlarmInfo, AlarmState
from rollback_engine.domain.errors import AlarmBackendError
from rollback_engine.infrastructure.alarms.alarm_backend import AlarmBackend
from rollback_engine.infrastructure.datadog.base_client import BaseDatadogClient

logger = logging.getLogger(__name__)

# Datadog overall_state -> alarm state. Only "Alert" counts as triggered; unlisted states read as OK.
_STATE_MAP: Dict[str, AlarmState] = {
    "Alert": "ALARM",
    "No Data": "INSUFFICIENT_DATA",
    "Unknown": "INSUFFICIENT_DATA",
    "Skipped": "INSUFFICIENT_DATA",
}


class DatadogAlarmBackend(BaseDatadogClient, AlarmBackend):
    """Client for reading monitor states from the Datadog monitors API."""

    def __init__(
        self,
        alarm_name_prefix: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        app_key: Optional[str] = None,
        site: Optional[str] = None,
    ):
        super().__init__(timeout=timeout, client=client, api_key=api_key, app_key=app_key, site=site)
        self._alarm_name_prefix = alarm_name_prefix
        self._monitor_url = f"{self._base_url}/api/v1/monitor"

    async def list_alarm_states(self, environment: str) -> List[AlarmInfo]:
        if not self._is_api_available():
            raise AlarmBackendError("Datadog API keys not configured")

        name_prefix = f"{self._alarm_name_prefix}-{environment}"
        logger.info(f"🔍 Reading Datadog monitors matching '{name_prefix}'")

        try:
            response = await self._make_request(
                "GET",
                self._monitor_url,
                headers=self._get_headers(content_type=None),
                params={"name": name_prefix, "monitor_tags": f"env:{environment}"},
            )
        except httpx.HTTPError as e:
            raise AlarmBackendError(f"Failed to check alarms: {e}") from e

        if response.status_code != 200:
            raise AlarmBackendError(
                f"Failed to check alarms: Datadog API error {response.status_code}"
            )

        monitors = response.json()
        alarms = [
            self._to_alarm_info(monitor)
            for monitor in monitors
            if str(monitor.get("name", "")).startswith(name_prefix)
        ]
        logger.info(f"✅ Read {len(alarms)} monitor state(s) for {environment}")
        return alarms

    def _to_alarm_info(self, monitor: Dict[str, Any]) -> AlarmInfo:
        overall_state = monitor.get("overall_state", "Unknown")
        return AlarmInfo(
            name=monitor.get("name", "unknown"),
            state=_STATE_MAP.get(overall_state, "OK"),
            reason=monitor.get("message") or None,
        )
