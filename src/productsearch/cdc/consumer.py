"""Change feed consumer.

Offsets are committed by hand, one message at a time, and only after its
handler returned. A failing message is not committed: the consumer seeks
back to it so the next poll delivers it again.
"""

import threading

import structlog
from confluent_kafka import Consumer, KafkaError, KafkaException, Message, TopicPartition

from productsearch.cdc.handlers import ChangeHandler

logger = structlog.get_logger(__name__)


def consumer_config(bootstrap_servers: str, group_id: str) -> dict:
    return {
        "bootstrap.servers": bootstrap_servers,
        "group.id": group_id,
        "auto.offset.reset": "earliest",
        "enable.auto.commit": False,
        "session.timeout.ms": 30000,
        "heartbeat.interval.ms": 10000,
    }


class ChangeFeedConsumer:
    def __init__(self, handlers: dict[str, ChangeHandler], consumer: Consumer, poll_timeout: float = 1.0) -> None:
        self.handlers = handlers
        self.consumer = consumer
        self.poll_timeout = poll_timeout

    def process(self, message: Message) -> bool:
        """Handle one polled message; True when it was committed."""
        error = message.error()
        if error is not None:
            if error.code() == KafkaError._PARTITION_EOF:
                logger.debug("Reached end of partition", topic=message.topic(), partition=message.partition())
                return False
            raise KafkaException(error)

        topic = message.topic()
        handler = self.handlers.get(topic)
        if handler is None:
            logger.warning("No handler registered for topic", topic=topic)
            self._commit(message)
            return True

        value = message.value()
        if value is None:
            # Tombstone following a delete; the delete event itself was handled
            self._commit(message)
            return True

        try:
            with structlog.contextvars.bound_contextvars(
                topic=topic, partition=message.partition(), offset=message.offset()
            ):
                handler.handle(value)
        except Exception as e:
            logger.error(
                "Change event handling failed, will redeliver",
                topic=topic,
                partition=message.partition(),
                offset=message.offset(),
                error=str(e),
            )
            self.consumer.seek(TopicPartition(topic, message.partition(), message.offset()))
            return False

        self._commit(message)
        return True

    def _commit(self, message: Message) -> None:
        self.consumer.commit(message=message, asynchronous=False)

    def run(self, stop_event: threading.Event) -> None:
        topics = sorted(self.handlers)
        self.consumer.subscribe(topics)
        logger.info("Subscribed to change feed", topics=len(topics))
        try:
            while not stop_event.is_set():
                message = self.consumer.poll(timeout=self.poll_timeout)
                if message is None:
                    continue
                self.process(message)
        finally:
            logger.info("Closing change feed consumer")
            self.consumer.close()


def create_consumer(handlers: dict[str, ChangeHandler], bootstrap_servers: str, group_id: str) -> ChangeFeedConsumer:
    return ChangeFeedConsumer(handlers, Consumer(consumer_config(bootstrap_servers, group_id)))
