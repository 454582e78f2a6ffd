"""
Unified exception hierarchy for sqlite-testkit.

All errors raised by the package derive from TestkitError, so callers can
catch every framework failure with a single except clause while still being
able to handle session, configuration and database errors separately.
"""

from typing import Any


class TestkitError(Exception):
    """
    Base exception for all sqlite-testkit errors.

    Carries a human-readable message plus optional keyword context that is
    rendered into the string representation.

    Example:
        try:
            proc.execute("SELECT 1;")
        except TestkitError as e:
            lg.error(f"testkit error: {e}")
    """

    __test__ = False  # not a pytest test class despite the name

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(TestkitError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or too large
        - Invalid YAML syntax
        - Invalid value for a session setting
    """

    pass


class DatabaseError(TestkitError):
    """
    Errors raised by the in-process fixture helpers.

    Examples:
        - Journal mode could not be applied
        - Requested row does not exist
    """

    pass


class SessionError(TestkitError):
    """Base class for errors raised by an interactive process session."""

    pass


class SpawnError(SessionError):
    """
    The external process could not be launched, or one of its pipe handles
    could not be obtained. No session exists after this error.
    """

    pass


class ExecError(SessionError):
    """
    A command could not be exchanged with the process.

    Raised when a write, flush or read against the pipes fails, when a
    required handle has been taken out of the session, or when a command
    contains the reserved end marker. The session should not be used for
    further commands after this error.
    """

    pass


class IncompleteOutputError(ExecError):
    """The output stream ended before the end marker was observed."""

    pass


class FixtureSetupError(SessionError):
    """A fixture setup command failed; the test cannot meaningfully continue."""

    pass


class ShutdownHangError(SessionError):
    """
    The process did not exit within the shutdown ceiling.

    The process has already been killed when this is raised. It signals a
    stuck external process or a protocol mismatch, so it is not meant to be
    caught and retried.
    """

    def __init__(self, path: Any, timeout: float, program: str = "sqlite3") -> None:
        super().__init__(f"{program} process hung for {path}", timeout=timeout)
        self.path = path
        self.timeout = timeout
