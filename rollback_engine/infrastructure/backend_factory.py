"""
Factory for the collaborator backends used by the rollback engine.

Each backend is picked from configuration: the HTTP or Datadog client when
its settings are present, the in-memory implementation otherwise.
"""

import logging
from typing import Dict

from rollback_engine.config import Settings
from rollback_engine.infrastructure.alarms.alarm_backend import AlarmBackend, InMemoryAlarmBackend
from rollback_engine.infrastructure.alarms.datadog_alarm_backend import DatadogAlarmBackend
from rollback_engine.infrastructure.artifacts.artifact_store import ArtifactStore, InMemoryArtifactStore
from rollback_engine.infrastructure.artifacts.http_artifact_store import HttpArtifactStore
from rollback_engine.infrastructure.cicd.cicd_client import CICDClient
from rollback_engine.infrastructure.cicd.deployment_executor import (
    DeploymentExecutor,
    InfrastructureReverter,
    InMemoryDeploymentExecutor,
    InMemoryInfrastructureReverter,
)
from rollback_engine.infrastructure.history.history_store import HistoryStore, InMemoryHistoryStore
from rollback_engine.infrastructure.history.http_history_store import HttpHistoryStore
from rollback_engine.infrastructure.notifications.channel import (
    InMemoryNotificationChannel,
    NotificationChannel,
)
from rollback_engine.infrastructure.notifications.webhook_channel import WebhookNotificationChannel

logger = logging.getLogger(__name__)


class BackendFactory:
    """Creates collaborator backends from a ``Settings`` instance."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_alarm_backend(self) -> AlarmBackend:
        if self.settings.datadog_enabled:
            logger.info("🐶 Using Datadog monitors for health checks")
            return DatadogAlarmBackend(
                self.settings.ALARM_NAME_PREFIX,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
                api_key=self.settings.DATADOG_API_KEY,
                app_key=self.settings.DATADOG_APP_KEY,
                site=self.settings.DATADOG_SITE,
            )
        logger.warning("⚠️ Datadog API keys not available, using in-memory alarm states")
        return InMemoryAlarmBackend()

    def create_artifact_store(self) -> ArtifactStore:
        if self.settings.ARTIFACTS_BASE_URL:
            return HttpArtifactStore(
                self.settings.ARTIFACTS_BASE_URL, timeout=self.settings.HTTP_TIMEOUT_SECONDS
            )
        logger.warning("⚠️ ARTIFACTS_BASE_URL not set, using in-memory artifact store")
        return InMemoryArtifactStore()

    def create_history_store(self) -> HistoryStore:
        if self.settings.HISTORY_API_URL:
            return HttpHistoryStore(
                self.settings.HISTORY_API_URL, timeout=self.settings.HTTP_TIMEOUT_SECONDS
            )
        logger.warning("⚠️ HISTORY_API_URL not set, using in-memory deployment history")
        return InMemoryHistoryStore()

    def create_deployment_backends(self) -> tuple[DeploymentExecutor, InfrastructureReverter]:
        if self.settings.CICD_API_URL:
            client = CICDClient(
                self.settings.CICD_API_URL,
                token=self.settings.CICD_API_TOKEN,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            )
            return client, client
        logger.warning("⚠️ CICD_API_URL not set, deployments are only recorded in memory")
        return InMemoryDeploymentExecutor(), InMemoryInfrastructureReverter()

    def create_notification_channel(self) -> NotificationChannel:
        if self.settings.NOTIFICATION_WEBHOOK_URL:
            return WebhookNotificationChannel(self.settings.NOTIFICATION_WEBHOOK_URL)
        logger.warning("⚠️ NOTIFICATION_WEBHOOK_URL not set, notifications are kept in memory")
        return InMemoryNotificationChannel()

    def get_backend_modes(self) -> Dict[str, str]:
        """Which implementation each collaborator resolves to: 'remote' or 'memory'."""
        return {
            "alarms": "datadog" if self.settings.datadog_enabled else "memory",
            "artifacts": "remote" if self.settings.ARTIFACTS_BASE_URL else "memory",
            "history": "remote" if self.settings.HISTORY_API_URL else "memory",
            "cicd": "remote" if self.settings.CICD_API_URL else "memory",
            "notifications": "remote" if self.settings.NOTIFICATION_WEBHOOK_URL else "memory",
        }
