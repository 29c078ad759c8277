"""Source gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeSourceGateway for development and testing
- SqlSourceGateway for production (SOURCE_ADAPTER=sql)
"""

import os

from productsearch.source.port import SourceGateway

_current_gateway: SourceGateway | None = None


def get_gateway() -> SourceGateway:
    """Return the current source gateway. Defaults to SOURCE_ADAPTER or the fake."""
    global _current_gateway
    if _current_gateway is None:
        adapter = os.environ.get("SOURCE_ADAPTER", "fake")
        if adapter == "fake":
            from productsearch.source.fake_adapter import FakeSourceGateway

            _current_gateway = FakeSourceGateway()
        elif adapter == "sql":
            from productsearch.config import get_settings
            from productsearch.source.sql_adapter import SqlSourceGateway

            _current_gateway = SqlSourceGateway(get_settings().database_url)
        else:
            raise ValueError(f"Unknown source adapter: {adapter}")
    return _current_gateway


def set_gateway(gateway: SourceGateway) -> None:
    """Override the active source gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
