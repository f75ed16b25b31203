from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from rollback_engine.domain.entities.deployment import Deployment, Environment
from rollback_engine.domain.entities.rollback import RollbackResult


class RollbackRequest(BaseModel):
    deployment: Deployment
    reason: str = Field(..., min_length=1)


class ValidateRollbackRequest(BaseModel):
    environment: Environment


class AlarmEventResponse(BaseModel):
    status: Literal["ignored", "rolled_back"]
    result: Optional[RollbackResult] = None


class ErrorResponse(BaseModel):
    """Response model for errors."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Optional error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
