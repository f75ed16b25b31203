"""
Alarm backend interface.

An alarm backend reports the current state of every monitoring alarm
scoped to one environment's deployment.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from rollback_engine.domain.entities.health import AlarmInfo


class AlarmBackend(ABC):
    @abstractmethod
    async def list_alarm_states(self, environment: str) -> List[AlarmInfo]:
        """
        Read the current alarm states for an environment.

        Raises:
            AlarmBackendError: If the monitoring backend cannot be reached
        """
        pass


class InMemoryAlarmBackend(AlarmBackend):
    """Alarm states held in memory, keyed by environment."""

    def __init__(self, alarms: Optional[Dict[str, Iterable[AlarmInfo]]] = None):
        self._alarms: Dict[str, List[AlarmInfo]] = {
            env: list(items) for env, items in (alarms or {}).items()
        }
        self.reads: List[str] = []

    def set_alarms(self, environment: str, alarms: Iterable[AlarmInfo]) -> None:
        self._alarms[environment] = list(alarms)

    async def list_alarm_states(self, environment: str) -> List[AlarmInfo]:
        self.reads.append(environment)
        return [alarm.model_copy() for alarm in self._alarms.get(environment, [])]
