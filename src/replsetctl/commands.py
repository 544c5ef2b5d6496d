"""Typed requests and replies of the mongod control endpoint."""

import enum
from dataclasses import dataclass, field
from typing import Any

ADMIN_DATABASE = "admin"

ADMIN_ROLES = (
    "dbAdminAnyDatabase",
    "userAdminAnyDatabase",
    "readWriteAnyDatabase",
    "clusterAdmin",
)


class Command:
    """Base class for control endpoint requests."""

    database: str = ADMIN_DATABASE

    def to_document(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Ping(Command):
    def to_document(self) -> dict[str, Any]:
        return {"ping": 1}


@dataclass(frozen=True)
class ReplSetGetStatus(Command):
    def to_document(self) -> dict[str, Any]:
        return {"replSetGetStatus": 1}


@dataclass(frozen=True)
class ReplSetGetConfig(Command):
    def to_document(self) -> dict[str, Any]:
        return {"replSetGetConfig": 1}


@dataclass(frozen=True)
class ReplSetInitiate(Command):
    config: dict[str, Any]

    def to_document(self) -> dict[str, Any]:
        return {"replSetInitiate": self.config}


@dataclass(frozen=True)
class ReplSetReconfig(Command):
    config: dict[str, Any]

    def to_document(self) -> dict[str, Any]:
        return {"replSetReconfig": self.config}


@dataclass(frozen=True)
class CreateUser(Command):
    username: str
    password: str = field(repr=False)
    roles: tuple[str, ...]
    database: str = ADMIN_DATABASE

    def to_document(self) -> dict[str, Any]:
        return {"createUser": self.username, "pwd": self.password, "roles": list(self.roles)}


@dataclass(frozen=True)
class UpdateUserPassword(Command):
    username: str
    password: str = field(repr=False)
    database: str = ADMIN_DATABASE

    def to_document(self) -> dict[str, Any]:
        return {"updateUser": self.username, "pwd": self.password}


class MemberState(enum.Enum):
    STARTUP = "STARTUP"
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    OTHER = "OTHER"

    @classmethod
    def from_code(cls, code: int | None) -> "MemberState":
        # https://www.mongodb.com/docs/manual/reference/replica-states/
        if code is None or code in (0, 5):
            return cls.STARTUP
        if code == 1:
            return cls.PRIMARY
        if code == 2:
            return cls.SECONDARY
        return cls.OTHER


@dataclass(frozen=True)
class GroupStatus:
    """Point-in-time replica set status of a node."""

    startup_in_progress: bool
    state: MemberState

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "GroupStatus":
        return cls(
            startup_in_progress=bool(document.get("startupStatus")),
            state=MemberState.from_code(document.get("myState")),
        )

    @property
    def ready(self) -> bool:
        return not self.startup_in_progress and self.state in (
            MemberState.PRIMARY,
            MemberState.SECONDARY,
        )


class Outcome(enum.Enum):
    """Result of an operation whose failure may be tolerated."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    IGNORED = "ignored"
