from typing import Literal, Optional

from pydantic import BaseModel

RollbackLevel = Literal["stage", "full", "none"]


class RollbackResult(BaseModel):
    success: bool
    level: RollbackLevel
    duration: float = 0.0
    reason: Optional[str] = None
