"""Pytest configuration for replsetctl tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from replsetctl.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with credentials set and local state under tmp_path."""
    return Settings(
        admin_password="adminpass",
        user="app",
        password="apppass",
        database="appdb",
        replica_name="rs0",
        service_name="mongodb",
        config_path=tmp_path / "mongod.conf",
        keyfile_path=tmp_path / "keyfile",
        address_cache_path=tmp_path / ".address",
        max_attempts=3,
        sleep_time=0,
    )


@pytest.fixture
def mock_conn() -> MagicMock:
    """Create a mock NodeConnection usable as an async context manager."""
    conn = MagicMock()
    conn.execute = AsyncMock(return_value={"ok": 1})
    conn.connect = AsyncMock()
    conn.close = AsyncMock()
    conn.__aenter__ = AsyncMock(return_value=conn)
    conn.__aexit__ = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def resolver() -> MagicMock:
    """Create a mock dns.asyncresolver.Resolver answering no records."""
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=[])
    return resolver


@pytest.fixture
def replset_config_document() -> dict:
    """Create a replSetGetConfig config document of a running replica set."""
    return {
        "_id": "rs0",
        "version": 3,
        "protocolVersion": 1,
        "members": [
            {"_id": 0, "host": "10.0.0.5:27017"},
            {"_id": 1, "host": "10.0.0.6:27017"},
            {"_id": 2, "host": "10.0.0.7:27017"},
        ],
        "settings": {"chainingAllowed": True},
    }
