import logging
from functools import lru_cache

from rollback_engine.config import settings
from rollback_engine.domain.services.alarm_event_service import AlarmEventProcessor
from rollback_engine.domain.services.deployment_state_service import DeploymentStateStore
from rollback_engine.domain.services.health_monitor import HealthCheckMonitor
from rollback_engine.domain.services.notification_service import Notifier
from rollback_engine.domain.services.rollback_service import RollbackOrchestrator
from rollback_engine.infrastructure.backend_factory import BackendFactory
from rollback_engine.utils.clock import AsyncioClock

logger = logging.getLogger(__name__)


@lru_cache
def get_backend_factory() -> BackendFactory:
    return BackendFactory(settings)


@lru_cache
def get_state_store() -> DeploymentStateStore:
    return DeploymentStateStore(get_backend_factory().create_history_store())


@lru_cache
def get_orchestrator() -> RollbackOrchestrator:
    factory = get_backend_factory()
    clock = AsyncioClock()
    executor, reverter = factory.create_deployment_backends()

    logger.info(f"🔧 Building rollback orchestrator with backends {factory.get_backend_modes()}")
    return RollbackOrchestrator(
        artifact_store=factory.create_artifact_store(),
        deployment_executor=executor,
        infrastructure_reverter=reverter,
        health_monitor=HealthCheckMonitor(factory.create_alarm_backend(), clock=clock),
        state_store=get_state_store(),
        notifier=Notifier(factory.create_notification_channel(), settings.NOTIFICATION_TOPIC),
        clock=clock,
    )


@lru_cache
def get_alarm_event_processor() -> AlarmEventProcessor:
    return AlarmEventProcessor(
        get_orchestrator(),
        get_state_store(),
        settings.environment_prefixes_list,
    )
