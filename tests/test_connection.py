"""Tests for the control endpoint connection."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo import errors

from replsetctl.commands import ReplSetGetStatus
from replsetctl.connection import NodeConnection
from replsetctl.exceptions import CommandError, ConnectionError


def mock_motor_client(command: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.__getitem__.return_value.command = command
    return client


class TestNodeConnection:
    def test_init(self) -> None:
        conn = NodeConnection(["localhost:27017"], timeout=2.0)
        assert conn.hosts == ["localhost:27017"]
        assert not conn.is_connected

    def test_direct_connection_options(self) -> None:
        conn = NodeConnection(["localhost:27017"], timeout=2.0)
        options = conn._client_options()
        assert options["directConnection"] is True
        assert options["serverSelectionTimeoutMS"] == 2000
        assert "replicaSet" not in options
        assert "username" not in options

    def test_replica_set_options(self) -> None:
        conn = NodeConnection(
            ["10.0.0.6:27017", "10.0.0.7:27017"],
            replica_set="rs0",
            username="admin",
            password="secret",
        )
        options = conn._client_options()
        assert options["replicaSet"] == "rs0"
        assert "directConnection" not in options
        assert options["username"] == "admin"
        assert options["password"] == "secret"
        assert options["authSource"] == "admin"

    async def test_connect_success(self) -> None:
        command = AsyncMock(return_value={"ok": 1.0})
        client = mock_motor_client(command)

        with patch("replsetctl.connection.AsyncIOMotorClient", return_value=client) as factory:
            conn = NodeConnection(["localhost:27017"])
            await conn.connect()

        assert conn.is_connected
        factory.assert_called_once()
        assert factory.call_args.args[0] == ["localhost:27017"]
        command.assert_awaited_once_with({"ping": 1})

        await conn.close()
        assert not conn.is_connected
        client.close.assert_called_once()

    async def test_connect_refused(self) -> None:
        command = AsyncMock(side_effect=errors.ServerSelectionTimeoutError("connection refused"))
        client = mock_motor_client(command)

        with (
            patch("replsetctl.connection.AsyncIOMotorClient", return_value=client),
            pytest.raises(ConnectionError, match="Failed to reach localhost:27017"),
        ):
            await NodeConnection(["localhost:27017"]).connect()

        client.close.assert_called_once()

    async def test_context_manager(self) -> None:
        client = mock_motor_client(AsyncMock(return_value={"ok": 1.0}))

        with patch("replsetctl.connection.AsyncIOMotorClient", return_value=client):
            async with NodeConnection(["localhost:27017"]) as conn:
                assert conn.is_connected

        assert not conn.is_connected

    async def test_execute_not_connected(self) -> None:
        conn = NodeConnection(["localhost:27017"])

        with pytest.raises(ConnectionError, match="Not connected"):
            await conn.execute(ReplSetGetStatus())

    async def test_execute_rejected(self) -> None:
        failure = errors.OperationFailure(
            "already initialized",
            code=23,
            details={"ok": 0, "errmsg": "already initialized", "code": 23},
        )
        command = AsyncMock(side_effect=[{"ok": 1.0}, failure])
        client = mock_motor_client(command)

        with patch("replsetctl.connection.AsyncIOMotorClient", return_value=client):
            conn = NodeConnection(["localhost:27017"])
            await conn.connect()

            with pytest.raises(CommandError) as exc_info:
                await conn.execute(ReplSetGetStatus())

        assert exc_info.value.code == 23
        assert exc_info.value.message == "already initialized"

    async def test_execute_uses_request_database(self) -> None:
        from replsetctl.commands import UpdateUserPassword

        client = mock_motor_client(AsyncMock(return_value={"ok": 1.0}))

        with patch("replsetctl.connection.AsyncIOMotorClient", return_value=client):
            conn = NodeConnection(["localhost:27017"])
            await conn.connect()
            await conn.execute(UpdateUserPassword("app", "pw", "appdb"))

        client.__getitem__.assert_called_with("appdb")
