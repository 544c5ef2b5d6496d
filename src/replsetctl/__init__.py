"""Bootstrap and membership controller for MongoDB replica sets."""

from replsetctl.address import (
    AddressStore,
    FileAddressStore,
    MemoryAddressStore,
    NodeAddress,
    resolve_self_address,
)
from replsetctl.commands import GroupStatus, MemberState, Outcome
from replsetctl.config import Settings
from replsetctl.connection import NodeConnection
from replsetctl.credentials import CredentialProvisioner
from replsetctl.discovery import discover_peers
from replsetctl.exceptions import (
    CommandError,
    ConfigurationError,
    ConnectionError,
    ProbeTimeout,
    ReplSetError,
)
from replsetctl.initiator import initiate
from replsetctl.keyfile import ensure_keyfile
from replsetctl.membership import MembershipClient
from replsetctl.probe import Direction, wait_for_node
from replsetctl.replset_config import Member, ReplicaSetConfig, build_config

__all__ = [
    "connect",
    "Settings",
    "NodeAddress",
    "AddressStore",
    "FileAddressStore",
    "MemoryAddressStore",
    "resolve_self_address",
    "discover_peers",
    "Direction",
    "wait_for_node",
    "Member",
    "ReplicaSetConfig",
    "build_config",
    "GroupStatus",
    "MemberState",
    "Outcome",
    "NodeConnection",
    "initiate",
    "MembershipClient",
    "CredentialProvisioner",
    "ensure_keyfile",
    "ReplSetError",
    "ConnectionError",
    "CommandError",
    "ConfigurationError",
    "ProbeTimeout",
]

__version__ = "0.1.0"


async def connect(
    address: str,
    *,
    timeout: float = 5.0,
) -> NodeConnection:
    """Connect directly to a single mongod node.

    Args:
        address: Node address in "host:port" format
        timeout: Connection timeout in seconds

    Returns:
        A connected NodeConnection
    """
    conn = NodeConnection([address], timeout=timeout)
    await conn.connect()
    return conn
