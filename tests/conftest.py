import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay and pins every adapter to its in-memory
    implementation so no test reaches Postgres, Redis, Kafka or OpenSearch
    unless it builds that adapter itself.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    for name, value in {
        "SOURCE_ADAPTER": "fake",
        "EVENT_BUS_ADAPTER": "fake",
        "WORK_QUEUE_ADAPTER": "memory",
        "CACHE_ADAPTER": "memory",
        "SEARCH_INDEX_ADAPTER": "memory",
    }.items():
        os.environ[name] = value


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/core/" in test_path:
            item.add_marker(pytest.mark.core)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
