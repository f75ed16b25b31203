from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from rollback_engine.domain.entities.health import AlarmState


class AlarmEvent(BaseModel):
    """An alarm state change, as delivered by the monitoring backend's webhook."""
    alarm_name: str = Field(..., description="Name of the alarm that changed state")
    state: AlarmState = Field(..., description="New alarm state")
    reason: str = Field("", description="Why the alarm changed state")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="When the state changed")
    previous_state: Optional[AlarmState] = Field(None, description="State before the change")
