from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = Field("rollback-engine", alias="APP_NAME")
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")

    # Alarm names follow {ALARM_NAME_PREFIX}-{environment}-{metric}
    ALARM_NAME_PREFIX: str = Field("kiro-worker", alias="ALARM_NAME_PREFIX")
    ENVIRONMENT_PREFIXES: str = Field(
        "kiro-worker-test,kiro-worker-staging,kiro-worker-production",
        alias="ENVIRONMENT_PREFIXES",
    )

    # Datadog monitors back the health checks when both keys are present
    DATADOG_API_KEY: Optional[str] = Field(None, alias="DATADOG_API_KEY")
    DATADOG_APP_KEY: Optional[str] = Field(None, alias="DATADOG_APP_KEY")
    DATADOG_SITE: str = Field("datadoghq.com", alias="DATADOG_SITE")

    ARTIFACTS_BASE_URL: Optional[str] = Field(None, alias="ARTIFACTS_BASE_URL")
    HISTORY_API_URL: Optional[str] = Field(None, alias="HISTORY_API_URL")
    CICD_API_URL: Optional[str] = Field(None, alias="CICD_API_URL")
    CICD_API_TOKEN: Optional[str] = Field(None, alias="CICD_API_TOKEN")

    NOTIFICATION_WEBHOOK_URL: Optional[str] = Field(None, alias="NOTIFICATION_WEBHOOK_URL")
    NOTIFICATION_TOPIC: str = Field("deployment-rollbacks", alias="NOTIFICATION_TOPIC")

    HTTP_TIMEOUT_SECONDS: float = Field(30.0, alias="HTTP_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")

    @property
    def environment_prefixes_list(self) -> List[str]:
        return [prefix.strip() for prefix in self.ENVIRONMENT_PREFIXES.split(",") if prefix.strip()]

    @property
    def datadog_enabled(self) -> bool:
        """Both Datadog keys are required to query monitors."""
        return bool(self.DATADOG_API_KEY and self.DATADOG_APP_KEY)


settings = Settings()
