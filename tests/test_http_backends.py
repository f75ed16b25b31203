"""
Tests for the HTTP-backed collaborators.

Every client takes an injected ``httpx.AsyncClient``; requests are answered
by an ``httpx.MockTransport`` handler so nothing leaves the process.
"""

import json

import httpx
import pytest

from rollback_engine.domain.entities.artifact import Artifact
from rollback_engine.domain.errors import (
    AlarmBackendError,
    ArtifactNotFoundError,
    ArtifactStoreError,
    DeploymentExecutionError,
    HistoryStoreError,
)
from rollback_engine.infrastructure.alarms.datadog_alarm_backend import DatadogAlarmBackend
from rollback_engine.infrastructure.artifacts.http_artifact_store import HttpArtifactStore
from rollback_engine.infrastructure.cicd.cicd_client import CICDClient
from rollback_engine.infrastructure.history.http_history_store import HttpHistoryStore


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# ============================================================
# DATADOG ALARM BACKEND
# ============================================================

class TestDatadogAlarmBackend:
    MONITORS = [
        {"name": "kiro-worker-test-build-failures", "overall_state": "Alert", "message": "Build failures > 0"},
        {"name": "kiro-worker-test-high-error-rate", "overall_state": "OK"},
        {"name": "kiro-worker-test-latency", "overall_state": "No Data"},
    ]

    def backend(self, handler, **kwargs) -> DatadogAlarmBackend:
        kwargs.setdefault("api_key", "api-key")
        kwargs.setdefault("app_key", "app-key")
        return DatadogAlarmBackend("kiro-worker", client=mock_client(handler), site="datadoghq.eu", **kwargs)

    @pytest.mark.asyncio
    async def test_maps_monitor_states(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=self.MONITORS)

        backend = self.backend(handler)
        alarms = await backend.list_alarm_states("test")

        assert [(a.name, a.state) for a in alarms] == [
            ("kiro-worker-test-build-failures", "ALARM"),
            ("kiro-worker-test-high-error-rate", "OK"),
            ("kiro-worker-test-latency", "INSUFFICIENT_DATA"),
        ]
        assert alarms[0].reason == "Build failures > 0"
        assert requests[0].url.host == "api.datadoghq.eu"
        assert requests[0].url.params["name"] == "kiro-worker-test"
        assert requests[0].url.params["monitor_tags"] == "env:test"
        assert requests[0].headers["DD-API-KEY"] == "api-key"
        assert requests[0].headers["DD-APPLICATION-KEY"] == "app-key"
        await backend.close()

    @pytest.mark.asyncio
    async def test_unlisted_states_read_as_ok(self):
        backend = self.backend(
            lambda request: httpx.Response(
                200,
                json=[
                    {"name": "kiro-worker-test-errors", "overall_state": "Warn"},
                    {"name": "kiro-worker-test-latency", "overall_state": "Ignored"},
                ],
            )
        )

        alarms = await backend.list_alarm_states("test")

        assert [a.state for a in alarms] == ["OK", "OK"]
        await backend.close()

    @pytest.mark.asyncio
    async def test_filters_monitors_outside_the_prefix(self):
        backend = self.backend(
            lambda request: httpx.Response(
                200, json=[{"name": "kiro-worker-production-errors", "overall_state": "Alert"}]
            )
        )

        assert await backend.list_alarm_states("staging") == []
        await backend.close()

    @pytest.mark.asyncio
    async def test_api_error_raises(self):
        backend = self.backend(lambda request: httpx.Response(429, json={"errors": ["Rate limited"]}))

        with pytest.raises(AlarmBackendError, match="429"):
            await backend.list_alarm_states("test")
        await backend.close()

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        backend = self.backend(raise_connect_error)

        with pytest.raises(AlarmBackendError, match="Failed to check alarms"):
            await backend.list_alarm_states("test")
        await backend.close()


# ============================================================
# ARTIFACT STORE
# ============================================================

class TestHttpArtifactStore:
    @pytest.mark.asyncio
    async def test_existing_artifact(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        store = HttpArtifactStore("https://artifacts.example.com/", client=mock_client(handler))
        artifact = await store.fetch("staging", "xyz789")

        assert artifact.location == "https://artifacts.example.com/artifacts/xyz789/artifact.zip"
        assert requests[0].method == "HEAD"
        await store.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [403, 404])
    async def test_missing_artifact(self, status_code):
        store = HttpArtifactStore(
            "https://artifacts.example.com", client=mock_client(lambda request: httpx.Response(status_code))
        )

        with pytest.raises(ArtifactNotFoundError):
            await store.fetch("staging", "xyz789")
        await store.close()

    @pytest.mark.asyncio
    async def test_missing_version_never_hits_the_network(self):
        requests = []
        store = HttpArtifactStore(
            "https://artifacts.example.com",
            client=mock_client(lambda request: requests.append(request) or httpx.Response(200)),
        )

        with pytest.raises(ArtifactNotFoundError):
            await store.fetch("test", None)
        assert requests == []
        await store.close()

    @pytest.mark.asyncio
    async def test_server_error(self):
        store = HttpArtifactStore(
            "https://artifacts.example.com", client=mock_client(lambda request: httpx.Response(503))
        )

        with pytest.raises(ArtifactStoreError, match="HTTP 503"):
            await store.fetch("test", "xyz789")
        await store.close()


# ============================================================
# HISTORY STORE
# ============================================================

RECORD_JSON = {
    "deployment_id": "test#1700000000000",
    "environment": "test",
    "version": "abc123",
    "status": "succeeded",
    "start_time": "2026-01-01T00:00:00+00:00",
}


class TestHttpHistoryStore:
    @pytest.mark.asyncio
    async def test_query_most_recent_succeeded(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"deployments": [RECORD_JSON]})

        store = HttpHistoryStore("https://history.example.com", client=mock_client(handler))
        record = await store.query("test")

        assert record.deployment_id == "test#1700000000000"
        params = requests[0].url.params
        assert params["environment"] == "test"
        assert params["status"] == "succeeded"
        assert params["limit"] == "1"
        assert params["order"] == "desc"
        await store.close()

    @pytest.mark.asyncio
    async def test_query_without_history(self):
        store = HttpHistoryStore(
            "https://history.example.com",
            client=mock_client(lambda request: httpx.Response(200, json={"deployments": []})),
        )

        assert await store.query("production") is None
        await store.close()

    @pytest.mark.asyncio
    async def test_update_escapes_deployment_id(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={**RECORD_JSON, "status": "rolled_back"})

        store = HttpHistoryStore("https://history.example.com", client=mock_client(handler))
        record = await store.update("test#1700000000000", {"status": "rolled_back"})

        assert record.status == "rolled_back"
        assert requests[0].method == "PATCH"
        assert b"/deployments/test%231700000000000" in requests[0].url.raw_path
        assert json.loads(requests[0].content) == {"status": "rolled_back"}
        await store.close()

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self):
        store = HttpHistoryStore(
            "https://history.example.com", client=mock_client(lambda request: httpx.Response(500))
        )

        with pytest.raises(HistoryStoreError, match="HTTP 500"):
            await store.list_records("test")
        await store.close()


# ============================================================
# CI/CD CLIENT
# ============================================================

class TestCICDClient:
    @pytest.mark.asyncio
    async def test_deploy_and_revert(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(202, json={"execution_id": "exec-1"})

        client = CICDClient("https://cicd.example.com", token="secret", client=mock_client(handler))
        artifact = Artifact(
            version="xyz789",
            environment="staging",
            location="https://artifacts.example.com/artifacts/xyz789/artifact.zip",
        )

        await client.revert("staging", "xyz789")
        await client.deploy("staging", artifact)

        assert [r.url.path for r in requests] == ["/infrastructure/revert", "/deployments"]
        assert requests[1].headers["Authorization"] == "Bearer secret"
        body = json.loads(requests[1].content)
        assert body["version"] == "xyz789"
        assert body["trigger"] == "rollback"
        await client.close()

    @pytest.mark.asyncio
    async def test_rejected_deploy(self):
        client = CICDClient(
            "https://cicd.example.com", client=mock_client(lambda request: httpx.Response(409))
        )
        artifact = Artifact(version="xyz789", environment="test", location="memory://artifacts/xyz789")

        with pytest.raises(DeploymentExecutionError, match="HTTP 409"):
            await client.deploy("test", artifact)
        await client.close()

    @pytest.mark.asyncio
    async def test_unreachable_engine(self):
        client = CICDClient("https://cicd.example.com", client=mock_client(raise_connect_error))

        with pytest.raises(DeploymentExecutionError, match="revert infrastructure of test"):
            await client.revert("test", "xyz789")
        await client.close()
