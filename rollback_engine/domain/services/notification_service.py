import json
import logging
from enum import Enum
from typing import Any, Dict, Optional

from rollback_engine.infrastructure.notifications.channel import NotificationChannel

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Notifier:
    """
    Best-effort publisher of rollback status messages.

    ``notify`` never raises: a notification outage must not block or fail a
    rollback, so transport errors are logged and dropped.
    """

    def __init__(self, channel: NotificationChannel, topic: str):
        self.channel = channel
        self.topic = topic

    async def notify(
        self,
        severity: Severity,
        subject: str,
        body: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"[{severity.value}] {body}"
        if context:
            message += "\n\n" + json.dumps(context, indent=2, default=str)

        try:
            await self.channel.publish(self.topic, subject, message)
            logger.info(f"📣 Sent notification '{subject}'")
        except Exception as e:
            logger.error(f"❌ Failed to send notification '{subject}': {e}")
