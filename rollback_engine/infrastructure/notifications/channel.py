from abc import ABC, abstractmethod
from typing import List

from pydantic import BaseModel


class PublishedMessage(BaseModel):
    topic: str
    subject: str
    body: str


class NotificationChannel(ABC):
    @abstractmethod
    async def publish(self, topic: str, subject: str, body: str) -> None:
        """
        Publish one message to the alerting channel.

        Raises:
            NotificationError: If the transport rejects the message
        """
        pass


class InMemoryNotificationChannel(NotificationChannel):
    def __init__(self):
        self.messages: List[PublishedMessage] = []

    async def publish(self, topic: str, subject: str, body: str) -> None:
        self.messages.append(PublishedMessage(topic=topic, subject=subject, body=body))

    def subjects(self) -> List[str]:
        return [message.subject for message in self.messages]
