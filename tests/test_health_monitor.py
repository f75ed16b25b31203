from unittest.mock import AsyncMock

import pytest

from conftest import alarm
from rollback_engine.domain.errors import AlarmBackendError, HealthCheckError
from rollback_engine.domain.services.health_monitor import HealthCheckMonitor
from rollback_engine.infrastructure.alarms.alarm_backend import AlarmBackend


@pytest.mark.asyncio
async def test_empty_alarm_set_is_healthy(health_monitor):
    result = await health_monitor.monitor_health_checks("test")

    assert result.success is True
    assert result.failed_alarms == []
    assert result.reason is None


@pytest.mark.asyncio
async def test_only_alarm_state_fails(health_monitor, alarm_backend):
    alarm_backend.set_alarms(
        "staging",
        [
            alarm("kiro-worker-staging-build-failures", state="OK"),
            alarm("kiro-worker-staging-test-failures", state="INSUFFICIENT_DATA"),
        ],
    )

    result = await health_monitor.monitor_health_checks("staging")

    assert result.success is True


@pytest.mark.asyncio
async def test_reports_every_triggered_alarm(health_monitor, alarm_backend):
    alarm_backend.set_alarms(
        "production",
        [
            alarm("kiro-worker-production-build-failures"),
            alarm("kiro-worker-production-test-failures", state="OK"),
            alarm("kiro-worker-production-high-error-rate"),
        ],
    )

    result = await health_monitor.monitor_health_checks("production")

    assert result.success is False
    assert [a.name for a in result.failed_alarms] == [
        "kiro-worker-production-build-failures",
        "kiro-worker-production-high-error-rate",
    ]
    assert result.reason == (
        "2 alarm(s) in ALARM state: "
        "kiro-worker-production-build-failures, kiro-worker-production-high-error-rate"
    )


@pytest.mark.asyncio
async def test_alarms_are_scoped_to_environment(health_monitor, alarm_backend):
    alarm_backend.set_alarms("production", [alarm("kiro-worker-production-build-failures")])

    result = await health_monitor.monitor_health_checks("test")

    assert result.success is True
    assert alarm_backend.reads == ["test"]


@pytest.mark.asyncio
async def test_repeated_checks_are_identical(health_monitor, alarm_backend):
    alarm_backend.set_alarms("test", [alarm("test-alarm"), alarm("ok-alarm", state="OK")])

    first = await health_monitor.monitor_health_checks("test")
    second = await health_monitor.monitor_health_checks("test")

    assert first.success == second.success
    assert first.failed_alarms == second.failed_alarms


@pytest.mark.asyncio
async def test_backend_error_is_raised_not_coerced(clock):
    backend = AsyncMock(spec=AlarmBackend)
    backend.list_alarm_states.side_effect = AlarmBackendError("Failed to check alarms: throttled")
    monitor = HealthCheckMonitor(backend, clock=clock)

    with pytest.raises(HealthCheckError, match="throttled"):
        await monitor.monitor_health_checks("test")
