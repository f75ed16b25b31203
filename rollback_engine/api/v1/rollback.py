import logging

from fastapi import APIRouter, Depends, HTTPException

from rollback_engine.dependencies import get_alarm_event_processor, get_orchestrator
from rollback_engine.domain.entities.rollback import RollbackResult
from rollback_engine.domain.errors import RollbackError
from rollback_engine.domain.services.alarm_event_service import AlarmEventProcessor
from rollback_engine.domain.services.rollback_service import RollbackOrchestrator
from rollback_engine.schemas.alarm import AlarmEvent
from rollback_engine.schemas.rollback import (
    AlarmEventResponse,
    RollbackRequest,
    ValidateRollbackRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/rollback", response_model=RollbackResult)
async def execute_rollback(
    request: RollbackRequest,
    orchestrator: RollbackOrchestrator = Depends(get_orchestrator),
):
    """Roll back a failed deployment, escalating from stage to full rollback."""
    return await orchestrator.execute_rollback(request.deployment, request.reason)


@router.post("/rollback/validate", response_model=RollbackResult)
async def validate_rollback(
    request: ValidateRollbackRequest,
    orchestrator: RollbackOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.validate_rollback(request.environment)


@router.post("/alarms/events", response_model=AlarmEventResponse)
async def process_alarm_event(
    event: AlarmEvent,
    processor: AlarmEventProcessor = Depends(get_alarm_event_processor),
):
    """Alarm webhook: rolls back the active deployment when a deployment alarm fires."""
    try:
        result = await processor.process_alarm_event(event)
    except RollbackError as e:
        logger.error(f"❌ Rollback for alarm {event.alarm_name} failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if result is None:
        return AlarmEventResponse(status="ignored")
    return AlarmEventResponse(status="rolled_back", result=result)
