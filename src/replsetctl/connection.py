"""Connection to a mongod control endpoint."""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import errors

from replsetctl.commands import Command, Ping
from replsetctl.exceptions import CommandError, ConnectionError


class NodeConnection:
    """Async connection to a single node or to a replica set primary."""

    def __init__(
        self,
        hosts: list[str],
        *,
        replica_set: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 5.0,
    ) -> None:
        """Initialize connection (does not connect yet).

        Args:
            hosts: Node addresses in "host:port" format
            replica_set: Replica set name; commands are then routed to its primary
            username: Administrator user, authenticated against the admin database
            password: Administrator password
            timeout: Connection and server selection timeout in seconds
        """
        self._hosts = list(hosts)
        self._replica_set = replica_set
        self._username = username
        self._password = password
        self._timeout = timeout
        self._client: AsyncIOMotorClient | None = None

    @property
    def hosts(self) -> list[str]:
        return list(self._hosts)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _client_options(self) -> dict[str, Any]:
        timeout_ms = int(self._timeout * 1000)
        options: dict[str, Any] = {
            "serverSelectionTimeoutMS": timeout_ms,
            "connectTimeoutMS": timeout_ms,
        }
        if self._replica_set:
            options["replicaSet"] = self._replica_set
        else:
            options["directConnection"] = True
        if self._username:
            options["username"] = self._username
            options["password"] = self._password
            options["authSource"] = "admin"
        return options

    async def connect(self) -> None:
        """Open the client and check that the endpoint answers."""
        if self._client is not None:
            return

        try:
            self._client = AsyncIOMotorClient(self._hosts, **self._client_options())
        except errors.PyMongoError as e:
            raise ConnectionError(f"Invalid address {','.join(self._hosts)}: {e}") from e

        try:
            await self.execute(Ping())
        except Exception:
            self._client.close()
            self._client = None
            raise

    async def close(self) -> None:
        """Close the connection."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def __aenter__(self) -> "NodeConnection":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def execute(self, request: Command) -> dict[str, Any]:
        """Run a command and return the server reply."""
        if self._client is None:
            raise ConnectionError("Not connected")

        try:
            return await self._client[request.database].command(request.to_document())
        except errors.OperationFailure as e:
            message = (e.details or {}).get("errmsg") or str(e)
            raise CommandError(e.code or 0, message) from e
        except errors.ConnectionFailure as e:
            raise ConnectionError(f"Failed to reach {','.join(self._hosts)}: {e}") from e
        except errors.PyMongoError as e:
            raise ConnectionError(f"Command {type(request).__name__} failed: {e}") from e
