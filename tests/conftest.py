"""
Shared fixtures for rollback engine tests.

Collaborators are the in-memory implementations and time is a VirtualClock,
so every 60-second stabilization wait completes instantly.
"""

from datetime import datetime, timezone

import pytest

from rollback_engine.domain.entities.deployment import Deployment, DeploymentRecord
from rollback_engine.domain.entities.health import AlarmInfo
from rollback_engine.domain.services.deployment_state_service import DeploymentStateStore
from rollback_engine.domain.services.health_monitor import HealthCheckMonitor
from rollback_engine.domain.services.notification_service import Notifier
from rollback_engine.domain.services.rollback_service import RollbackOrchestrator
from rollback_engine.infrastructure.alarms.alarm_backend import InMemoryAlarmBackend
from rollback_engine.infrastructure.artifacts.artifact_store import InMemoryArtifactStore
from rollback_engine.infrastructure.cicd.deployment_executor import (
    InMemoryDeploymentExecutor,
    InMemoryInfrastructureReverter,
)
from rollback_engine.infrastructure.history.history_store import InMemoryHistoryStore
from rollback_engine.infrastructure.notifications.channel import InMemoryNotificationChannel
from rollback_engine.utils.clock import VirtualClock

PREVIOUS_VERSION = "xyz789"
LAST_KNOWN_GOOD_VERSION = "good001"


def make_record(environment: str, version: str, status: str = "succeeded", deployment_id: str = None) -> DeploymentRecord:
    return DeploymentRecord(
        deployment_id=deployment_id or f"{environment}#{version}",
        environment=environment,
        version=version,
        status=status,
        start_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def alarm(name: str, state: str = "ALARM") -> AlarmInfo:
    return AlarmInfo(name=name, state=state)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def alarm_backend() -> InMemoryAlarmBackend:
    return InMemoryAlarmBackend()


@pytest.fixture
def artifact_store() -> InMemoryArtifactStore:
    return InMemoryArtifactStore([PREVIOUS_VERSION, LAST_KNOWN_GOOD_VERSION])


@pytest.fixture
def executor() -> InMemoryDeploymentExecutor:
    return InMemoryDeploymentExecutor()


@pytest.fixture
def reverter() -> InMemoryInfrastructureReverter:
    return InMemoryInfrastructureReverter()


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def state_store(history_store) -> DeploymentStateStore:
    return DeploymentStateStore(history_store)


@pytest.fixture
def channel() -> InMemoryNotificationChannel:
    return InMemoryNotificationChannel()


@pytest.fixture
def notifier(channel) -> Notifier:
    return Notifier(channel, "test-topic")


@pytest.fixture
def health_monitor(alarm_backend, clock) -> HealthCheckMonitor:
    return HealthCheckMonitor(alarm_backend, clock=clock)


@pytest.fixture
def orchestrator(
    artifact_store, executor, reverter, health_monitor, state_store, notifier, clock
) -> RollbackOrchestrator:
    return RollbackOrchestrator(
        artifact_store=artifact_store,
        deployment_executor=executor,
        infrastructure_reverter=reverter,
        health_monitor=health_monitor,
        state_store=state_store,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def failed_deployment() -> Deployment:
    return Deployment(
        deployment_id="test#1234567890",
        environment="test",
        version="abc123",
        previous_version=PREVIOUS_VERSION,
        infrastructure_changed=False,
        pipeline_execution_id="exec-123",
    )
