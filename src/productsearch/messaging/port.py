"""Event bus port: publishes reindex signals to subscribers.

Delivery is at-least-once; publishers get an exception back when the
transport rejects a message.
"""

from abc import ABC, abstractmethod


class EventBus(ABC):
    """Abstract interface for event bus adapters."""

    @abstractmethod
    def publish(self, topic: str, key: str, payload: dict) -> None:
        """Publish one message.

        Raises:
            EventPublishError: the transport did not accept the message.
        """
        ...
