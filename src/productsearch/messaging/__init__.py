"""Event bus factory.

Uses FakeEventBus by default. Set EVENT_BUS_ADAPTER=broker to publish
through the domain's configured message broker.
"""

import os

from productsearch.messaging.port import EventBus

_bus_instance: EventBus | None = None


def get_event_bus() -> EventBus:
    """Return the configured event bus (singleton)."""
    global _bus_instance
    if _bus_instance is None:
        adapter = os.environ.get("EVENT_BUS_ADAPTER", "fake")
        if adapter == "fake":
            from productsearch.messaging.fake_adapter import FakeEventBus

            _bus_instance = FakeEventBus()
        elif adapter == "broker":
            from productsearch.messaging.broker_adapter import BrokerEventBus

            _bus_instance = BrokerEventBus()
        else:
            raise ValueError(f"Unknown event bus adapter: {adapter}")
    return _bus_instance


def set_event_bus(bus: EventBus) -> None:
    global _bus_instance
    _bus_instance = bus


def reset_event_bus() -> None:
    """Reset the event bus singleton (useful for testing)."""
    global _bus_instance
    _bus_instance = None
