"""Integration test fixtures for replsetctl.

These tests require a running mongod started with --replSet rs0 and no users.
Start one with:
    docker run -d -p 27017:27017 mongo --replSet rs0
and point REPLSETCTL_TEST_NODE at it (e.g. "localhost:27017").
"""

import os

import pytest

from replsetctl.address import NodeAddress

MONGOD_TEST_NODE = os.environ.get("REPLSETCTL_TEST_NODE")


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: marks tests as requiring a running mongod")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if MONGOD_TEST_NODE:
        return
    skip = pytest.mark.skip(reason="REPLSETCTL_TEST_NODE is not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def node_address() -> NodeAddress:
    """Get the test node address."""
    assert MONGOD_TEST_NODE is not None
    return NodeAddress.parse(MONGOD_TEST_NODE)
