"""Shared-secret keyfile provisioning."""

import logging
import os
import re
import stat
from pathlib import Path

from replsetctl.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

KEYFILE_DIRECTIVE = re.compile(r"^\s*keyFile", re.MULTILINE)


def has_keyfile_directive(config_path: Path) -> bool:
    """Check whether the mongod configuration file already sets a keyfile."""
    try:
        text = Path(config_path).read_text()
    except FileNotFoundError:
        return False
    return KEYFILE_DIRECTIVE.search(text) is not None


def _permission_details(directory: Path) -> list[str]:
    st = directory.stat()
    groups = " ".join(str(gid) for gid in os.getgroups())
    return [
        f"current user id = {os.geteuid()}, user groups: {groups}",
        f"directory permissions: {stat.filemode(st.st_mode)} owned by {st.st_uid}:{st.st_gid}",
    ]


def ensure_keyfile(config_path: Path, key_value: str | None, dest_path: Path) -> list[str]:
    """Write the replica set keyfile unless the configuration file provides one.

    Args:
        config_path: mongod configuration file to check for a keyFile directive
        key_value: Shared secret of the replica set
        dest_path: Where to write the keyfile

    Returns:
        Extra mongod arguments; empty when the keyfile is configured externally

    Raises:
        ConfigurationError: If the secret is missing or the destination
            directory is not writable
    """
    if has_keyfile_directive(config_path):
        logger.info("Using keyFile from %s", config_path)
        return []

    if not key_value:
        raise ConfigurationError(
            "You have to provide the 'keyfile' value in MONGODB_KEYFILE_VALUE"
        )

    dest_path = Path(dest_path)
    directory = dest_path.parent
    if not os.access(directory, os.W_OK):
        details = [
            f"CAUSE: current user doesn't have permissions for writing to {directory} directory"
        ]
        if directory.exists():
            details.extend(f"DETAILS: {line}" for line in _permission_details(directory))
        raise ConfigurationError(f"Couldn't create {dest_path}", details)

    fd = os.open(dest_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(f"{key_value}\n")
    # O_CREAT leaves the mode of an existing file alone
    dest_path.chmod(0o600)
    logger.info("Keyfile written to %s", dest_path)
    return ["--keyFile", str(dest_path)]
