"""Replica set configuration documents."""

import copy
from dataclasses import dataclass
from typing import Any

from replsetctl.address import NodeAddress


@dataclass(frozen=True)
class Member:
    member_id: int
    host: NodeAddress


@dataclass(frozen=True)
class ReplicaSetConfig:
    """Initial configuration of a replica set."""

    replica_set_id: str
    members: tuple[Member, ...]

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.replica_set_id,
            "members": [{"_id": m.member_id, "host": str(m.host)} for m in self.members],
        }


def build_config(
    replica_set_id: str,
    self_addr: NodeAddress,
    peers: list[NodeAddress],
) -> ReplicaSetConfig:
    """Build the configuration used to initiate a new replica set.

    The local node is always member 0. Every other peer gets the next id in
    the order it was discovered; the local node and repeated peers are skipped.
    """
    members = [Member(0, self_addr)]
    seen = {self_addr}

    for peer in peers:
        if peer in seen:
            continue
        seen.add(peer)
        members.append(Member(len(members), peer))

    return ReplicaSetConfig(replica_set_id, tuple(members))


def add_member(document: dict[str, Any], host: str) -> dict[str, Any] | None:
    """Return a copy of a config document with ``host`` appended.

    Returns None when ``host`` is already a member.
    """
    members = document.get("members", [])
    if any(m.get("host") == host for m in members):
        return None

    updated = copy.deepcopy(document)
    next_id = max((m["_id"] for m in members), default=-1) + 1
    updated.setdefault("members", []).append({"_id": next_id, "host": host})
    updated["version"] = updated.get("version", 0) + 1
    return updated


def remove_member(document: dict[str, Any], host: str) -> dict[str, Any] | None:
    """Return a copy of a config document without ``host``.

    Returns None when ``host`` is not a member.
    """
    members = document.get("members", [])
    if not any(m.get("host") == host for m in members):
        return None

    updated = copy.deepcopy(document)
    updated["members"] = [m for m in updated["members"] if m.get("host") != host]
    updated["version"] = updated.get("version", 0) + 1
    return updated
