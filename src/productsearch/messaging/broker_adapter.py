"""Event bus backed by the domain's message broker.

Uses the broker configured under ``brokers.default`` in domain.toml (Redis
Streams in production, inline in tests). Redis Streams have no message
key, so the key travels in the message body.
"""

import structlog
from protean.utils.globals import current_domain

from productsearch.errors import EventPublishError
from productsearch.messaging.port import EventBus

logger = structlog.get_logger(__name__)


class BrokerEventBus(EventBus):
    def __init__(self, broker=None, broker_name: str = "default") -> None:
        self._broker = broker
        self.broker_name = broker_name

    @property
    def broker(self):
        if self._broker is None:
            self._broker = current_domain.brokers[self.broker_name]
        return self._broker

    def publish(self, topic: str, key: str, payload: dict) -> None:
        message = {**payload, "key": key}
        try:
            self.broker.publish(topic, message)
        except Exception as e:
            logger.error("Broker publish failed", topic=topic, key=key, error=str(e))
            raise EventPublishError(f"Failed to publish {topic}/{key}: {e}") from e
