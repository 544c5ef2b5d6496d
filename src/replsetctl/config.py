"""Environment-derived settings for the replica set controller."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 27017


class Settings(BaseSettings):
    """Immutable controller settings, read once from ``MONGODB_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="MONGODB_", env_ignore_empty=True, frozen=True)

    # Credentials
    admin_password: str | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None

    # Replica set
    replica_name: str = "rs0"
    keyfile_value: str | None = None
    service_name: str = "mongodb"
    port: int = DEFAULT_PORT

    # mongod feature toggles
    noprealloc: bool = True
    smallfiles: bool = True
    quiet: bool = True
    text_search_enabled: bool = False

    # Local filesystem state
    datadir: Path = Path("/var/lib/mongodb/data")
    config_path: Path = Path("/etc/mongod.conf")
    keyfile_path: Path = Field(default_factory=lambda: Path.home() / "keyfile")
    address_cache_path: Path = Field(default_factory=lambda: Path.home() / ".address")

    # Waiting
    max_attempts: int = 60
    sleep_time: float = 1.0
    connect_timeout: float = 5.0

    def mongod_args(self) -> list[str]:
        """Render the common mongod command-line arguments."""
        args = [
            "--port",
            str(self.port),
            "--dbpath",
            str(self.datadir),
            "--replSet",
            self.replica_name,
        ]
        if self.noprealloc:
            args.append("--noprealloc")
        if self.smallfiles:
            args.append("--smallfiles")
        if self.quiet:
            args.append("--quiet")
        if self.text_search_enabled:
            args.extend(["--setParameter", "textSearchEnabled=true"])
        return args
