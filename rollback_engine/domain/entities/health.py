from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AlarmState = Literal["OK", "ALARM", "INSUFFICIENT_DATA"]


class AlarmInfo(BaseModel):
    name: str
    state: AlarmState
    reason: Optional[str] = None


class HealthCheckResult(BaseModel):
    success: bool
    failed_alarms: List[AlarmInfo] = Field(default_factory=list)
    duration: float = 0.0
    reason: Optional[str] = None
