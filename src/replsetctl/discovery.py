"""Peer discovery through DNS A records."""

import logging

import dns.asyncresolver
import dns.exception

from replsetctl.address import NodeAddress
from replsetctl.config import DEFAULT_PORT

logger = logging.getLogger(__name__)


async def discover_peers(
    service_name: str,
    *,
    port: int = DEFAULT_PORT,
    resolver: dns.asyncresolver.Resolver | None = None,
) -> list[NodeAddress]:
    """Resolve a service name to the addresses of its current members.

    An empty list is a normal answer (for example the first node of a new
    replica set), so lookup failures are reported as no peers.
    """
    try:
        resolver = resolver or dns.asyncresolver.Resolver()
        answer = await resolver.resolve(service_name, "A", search=True)
    except dns.exception.DNSException as e:
        logger.debug("No endpoints for %s: %s", service_name, e)
        return []

    peers: list[NodeAddress] = []
    for rdata in answer:
        peer = NodeAddress(rdata.address, port)
        if peer not in peers:
            peers.append(peer)
    return peers


def replica_set_seed(replica_name: str, peers: list[NodeAddress]) -> str:
    """Render the "name/host:port,host:port" descriptor of a replica set."""
    return f"{replica_name}/{','.join(str(peer) for peer in peers)}"
