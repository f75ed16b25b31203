import logging
from typing import Optional

import httpx

from rollback_engine.domain.errors import NotificationError
from rollback_engine.infrastructure.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


class WebhookNotificationChannel(NotificationChannel):
    """Posts messages as JSON to an incoming-webhook URL (Slack, Teams, SNS HTTP bridge)."""

    def __init__(self, webhook_url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self._webhook_url = webhook_url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def publish(self, topic: str, subject: str, body: str) -> None:
        payload = {
            "topic": topic,
            "subject": subject,
            "text": f"*{subject}*\n{body}",
        }
        try:
            response = await self.client.post(self._webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"Webhook rejected '{subject}': HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise NotificationError(f"Webhook delivery failed for '{subject}': {e}") from e

        logger.debug(f"📨 Published '{subject}' to {topic}")

    async def close(self):
        await self.client.aclose()
