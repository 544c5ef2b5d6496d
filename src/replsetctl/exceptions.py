"""Exceptions for the replica set controller."""


class ReplSetError(Exception):
    """Base exception for replica set controller errors."""

    pass


class ConnectionError(ReplSetError):
    """Control endpoint could not be reached."""

    pass


class CommandError(ReplSetError):
    """Control endpoint rejected a command."""

    code: int
    message: str

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(ReplSetError):
    """Required input is missing or the local node cannot proceed."""

    details: list[str]

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.details = list(details or [])
        super().__init__(message)


class ProbeTimeout(ReplSetError):
    """A bounded poll gave up without observing the desired condition."""

    description: str
    attempts: int

    def __init__(self, description: str, attempts: int) -> None:
        self.description = description
        self.attempts = attempts
        super().__init__(f"Giving up after {attempts} attempts: {description}")
