"""Command line interface of the replica set controller.

Usage:
    replsetctl address
    replsetctl wait-up [--host HOST]
    replsetctl initiate
    replsetctl join
    replsetctl leave
    replsetctl create-admin
    replsetctl create-user
    replsetctl reset-passwords
    replsetctl keyfile
    replsetctl mongod-args
"""

import argparse
import asyncio
import logging
import shlex
import sys
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from replsetctl.address import FileAddressStore, NodeAddress, resolve_self_address
from replsetctl.config import Settings
from replsetctl.connection import NodeConnection
from replsetctl.credentials import (
    CredentialProvisioner,
    require_admin_password,
    require_user_fields,
)
from replsetctl.discovery import discover_peers
from replsetctl.exceptions import ConfigurationError, ReplSetError
from replsetctl.initiator import initiate
from replsetctl.keyfile import ensure_keyfile
from replsetctl.membership import MembershipClient
from replsetctl.probe import Direction, wait_for_node
from replsetctl.replset_config import build_config

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, Settings], Awaitable[int]]


async def _self_address(settings: Settings) -> NodeAddress:
    return await resolve_self_address(
        FileAddressStore(settings.address_cache_path),
        port=settings.port,
        max_attempts=settings.max_attempts,
        interval=settings.sleep_time,
    )


def _local_connection(args: argparse.Namespace, settings: Settings) -> NodeConnection:
    return NodeConnection(
        [str(NodeAddress(args.host, settings.port))],
        timeout=settings.connect_timeout,
    )


async def cmd_address(args: argparse.Namespace, settings: Settings) -> int:
    print(await _self_address(settings))
    return 0


async def _wait(direction: Direction, args: argparse.Namespace, settings: Settings) -> int:
    result = await wait_for_node(
        direction,
        NodeAddress(args.host, settings.port),
        max_attempts=settings.max_attempts,
        interval=settings.sleep_time,
        timeout=settings.connect_timeout,
    )
    result.raise_for_timeout()
    return 0


async def cmd_wait_up(args: argparse.Namespace, settings: Settings) -> int:
    return await _wait(Direction.UP, args, settings)


async def cmd_wait_down(args: argparse.Namespace, settings: Settings) -> int:
    return await _wait(Direction.DOWN, args, settings)


async def cmd_initiate(args: argparse.Namespace, settings: Settings) -> int:
    self_addr = await _self_address(settings)
    peers = await discover_peers(settings.service_name, port=settings.port)
    config = build_config(settings.replica_name, self_addr, peers)

    async with _local_connection(args, settings) as conn:
        status = await initiate(conn, config, interval=settings.sleep_time)

    logger.info("Replica set %s is ready (%s)", config.replica_set_id, status.state.value)
    return 0


async def cmd_join(args: argparse.Namespace, settings: Settings) -> int:
    outcome = await MembershipClient(settings).join(await _self_address(settings))
    logger.info("Join: %s", outcome.value)
    return 0


async def cmd_leave(args: argparse.Namespace, settings: Settings) -> int:
    outcome = await MembershipClient(settings).leave(await _self_address(settings))
    logger.info("Leave: %s", outcome.value)
    return 0


async def cmd_create_admin(args: argparse.Namespace, settings: Settings) -> int:
    password = require_admin_password(settings.admin_password)
    async with _local_connection(args, settings) as conn:
        await CredentialProvisioner(conn).create_admin(password)
    return 0


async def cmd_create_user(args: argparse.Namespace, settings: Settings) -> int:
    user = require_user_fields(settings.user, settings.password, settings.database)
    async with _local_connection(args, settings) as conn:
        await CredentialProvisioner(conn).create_user(*user)
    return 0


async def cmd_reset_passwords(args: argparse.Namespace, settings: Settings) -> int:
    async with _local_connection(args, settings) as conn:
        provisioner = CredentialProvisioner(conn)
        await provisioner.reset_admin_password(settings.admin_password)
        await provisioner.reset_user_password(settings.user, settings.password, settings.database)
    return 0


async def cmd_keyfile(args: argparse.Namespace, settings: Settings) -> int:
    extra = ensure_keyfile(settings.config_path, settings.keyfile_value, settings.keyfile_path)
    print(shlex.join(extra))
    return 0


async def cmd_mongod_args(args: argparse.Namespace, settings: Settings) -> int:
    print(shlex.join(settings.mongod_args()))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="replsetctl",
        description="Bootstrap and membership controller for MongoDB replica sets",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    host = argparse.ArgumentParser(add_help=False)
    host.add_argument("--host", default="localhost", help="Node to talk to (default: localhost)")

    commands: list[tuple[str, str, Handler, list[argparse.ArgumentParser]]] = [
        ("address", "Resolve and cache this node's IP address", cmd_address, []),
        ("wait-up", "Wait until mongod accepts connections", cmd_wait_up, [host]),
        ("wait-down", "Wait until mongod stops accepting connections", cmd_wait_down, [host]),
        ("initiate", "Initiate a new replica set from the discovered peers", cmd_initiate, [host]),
        ("join", "Add this node to the replica set", cmd_join, []),
        ("leave", "Remove this node from the replica set", cmd_leave, []),
        ("create-admin", "Create the admin user", cmd_create_admin, [host]),
        ("create-user", "Create the application user", cmd_create_user, [host]),
        ("reset-passwords", "Reset admin and user passwords", cmd_reset_passwords, [host]),
        ("keyfile", "Write the replica set keyfile", cmd_keyfile, []),
        ("mongod-args", "Print the common mongod arguments", cmd_mongod_args, []),
    ]
    for name, help_text, func, parents in commands:
        sub = subparsers.add_parser(name, help=help_text, parents=parents)
        sub.set_defaults(func=func)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    logging.basicConfig(
        level=args.log_level,
        format="=> %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = Settings()
        return asyncio.run(args.func(args, settings))
    except ValidationError as e:
        print(f"=> Invalid configuration: {e}", file=sys.stderr)
        return 1
    except ReplSetError as e:
        print(f"=> {e}", file=sys.stderr)
        if isinstance(e, ConfigurationError):
            for line in e.details:
                print(line, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
