"""Recording event bus for tests and local development."""

from dataclasses import dataclass

from productsearch.errors import EventPublishError
from productsearch.messaging.port import EventBus


@dataclass(frozen=True)
class PublishedMessage:
    topic: str
    key: str
    payload: dict


class FakeEventBus(EventBus):
    """Keeps every accepted message in ``published``."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Broker unavailable"
        self.failing_keys: set[str] = set()
        self.published: list[PublishedMessage] = []
        self.attempts: int = 0

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Broker unavailable",
        failing_keys: list[str] | None = None,
    ) -> None:
        """Configure publish behavior; ``failing_keys`` fails only those keys."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failing_keys = set(failing_keys or [])

    def publish(self, topic: str, key: str, payload: dict) -> None:
        self.attempts += 1
        if not self.should_succeed or key in self.failing_keys:
            raise EventPublishError(f"{topic}/{key}: {self.failure_reason}")
        self.published.append(PublishedMessage(topic=topic, key=key, payload=dict(payload)))

    def messages(self, topic: str) -> list[PublishedMessage]:
        return [message for message in self.published if message.topic == topic]

    def ids(self, topic: str) -> list[int]:
        return [message.payload["id"] for message in self.messages(topic)]
