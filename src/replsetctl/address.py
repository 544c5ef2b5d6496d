"""Node addresses and the self-address cache."""

import ipaddress
import logging
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import psutil

from replsetctl.config import DEFAULT_PORT
from replsetctl.exceptions import ConfigurationError
from replsetctl.retry import poll_until

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeAddress:
    """Network address of a replica set member."""

    host: str
    port: int = DEFAULT_PORT

    @classmethod
    def parse(cls, address: str, default_port: int = DEFAULT_PORT) -> "NodeAddress":
        """Parse an address in "host" or "host:port" format."""
        host, sep, port_str = address.rpartition(":")
        if not sep:
            return cls(address, default_port)
        return cls(host, int(port_str))

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class AddressStore(ABC):
    """Abstract interface for persisting this node's own IP address."""

    @abstractmethod
    def load(self) -> str | None:
        """Get the persisted address, if any."""
        ...

    @abstractmethod
    def save(self, host: str) -> None:
        """Persist the address."""
        ...


class MemoryAddressStore(AddressStore):
    """In-memory address store."""

    def __init__(self, host: str | None = None) -> None:
        self._host = host

    def load(self) -> str | None:
        return self._host

    def save(self, host: str) -> None:
        self._host = host


class FileAddressStore(AddressStore):
    """Address store backed by a single-line file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        try:
            host = self._path.read_text().strip()
        except FileNotFoundError:
            return None
        return host or None

    def save(self, host: str) -> None:
        self._path.write_text(host)


def local_ipv4_addresses() -> list[str]:
    """List IPv4 addresses of interfaces that are up, excluding loopback and link-local."""
    stats = psutil.net_if_stats()
    addresses: list[str] = []

    for name, snics in psutil.net_if_addrs().items():
        if name in stats and not stats[name].isup:
            continue
        for snic in snics:
            if snic.family != socket.AF_INET:
                continue
            ip = ipaddress.IPv4Address(snic.address)
            if ip.is_loopback or ip.is_link_local:
                continue
            addresses.append(snic.address)

    return addresses


async def resolve_self_address(
    store: AddressStore,
    *,
    port: int = DEFAULT_PORT,
    max_attempts: int = 60,
    interval: float = 1.0,
) -> NodeAddress:
    """Resolve this node's externally reachable address.

    A previously persisted address wins over the current interface state, so
    the address stays stable for the lifetime of the node.

    Args:
        store: Where the address is cached
        port: Port the local mongod listens on
        max_attempts: Number of interface scans before giving up
        interval: Delay between scans in seconds

    Returns:
        The node address

    Raises:
        ConfigurationError: If no address appeared within the attempt budget
    """
    cached = store.load()
    if cached:
        return NodeAddress(cached, port)

    logger.info("Waiting for container IP address ...")
    found: list[str] = []

    async def has_address() -> bool:
        found[:] = local_ipv4_addresses()
        return bool(found)

    result = await poll_until(
        has_address,
        max_attempts=max_attempts,
        interval=interval,
        description="container IP address",
    )
    if not result.satisfied:
        raise ConfigurationError("Failed to get container IP address.")

    store.save(found[0])
    address = NodeAddress(found[0], port)
    logger.info("Container address is %s", address)
    return address
