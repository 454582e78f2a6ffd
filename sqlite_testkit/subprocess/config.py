"""
Settings for interactive process sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import ConfigError


@dataclass(frozen=True)
class SessionConfig:
    """
    Immutable session configuration.

    Attributes:
        program: Executable launched with the target path as its only argument
        shutdown_timeout: Seconds to wait for the process to exit on close
        poll_interval: Seconds between exit-status polls during close
        marker: Reserved text whose appearance in output ends a response
        marker_statement: Statement sent after each command to print the marker
        exit_directive: Line sent on close to request a graceful exit
        abort_on_hang: Raise ShutdownHangError when the process outlives
            shutdown_timeout; when False the hang is only logged
        encoding: Text encoding of the process streams
    """

    program: str = "sqlite3"
    shutdown_timeout: float = 60.0
    poll_interval: float = 0.1
    marker: str = "MARKER_END"
    marker_statement: str = "SELECT 'MARKER_END';"
    exit_directive: str = ".exit"
    abort_on_hang: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not self.program:
            raise ConfigError("session program cannot be empty")
        if self.shutdown_timeout <= 0:
            raise ConfigError(
                "shutdown timeout must be positive", timeout=self.shutdown_timeout
            )
        if self.poll_interval <= 0:
            raise ConfigError(
                "poll interval must be positive", interval=self.poll_interval
            )
        if not self.marker or self.marker not in self.marker_statement:
            raise ConfigError(
                "marker statement must print the marker",
                marker=self.marker,
                statement=self.marker_statement,
            )

    @classmethod
    def from_config(cls, config: Any, section: str = "session") -> SessionConfig:
        """
        Create SessionConfig from a Config or a plain dictionary.

        Short keys are accepted next to the field names so that environment
        overrides can stay single-word (TESTKIT_SESSION_TIMEOUT=5). Full field
        names also work from the environment
        (TESTKIT_SESSION_SHUTDOWN_TIMEOUT=5); they arrive split into nested
        sections and win over the file.

        Args:
            config: Config instance or dictionary
            section: Dotted path of the session section

        Returns:
            SessionConfig instance, defaults for anything not set

        Example:
            config = Config("etc/testkit.yaml")
            session_config = SessionConfig.from_config(config)
        """
        data = config.dict() if hasattr(config, "dict") else config
        current: Any = data or {}
        for part in section.split("."):
            current = current.get(part) if isinstance(current, dict) else None
        if not isinstance(current, dict):
            current = {}

        def pick(*keys: str) -> Any:
            # Env overrides split field names on "_": shutdown_timeout
            # arrives as {"shutdown": {"timeout": ...}} and takes precedence
            for key in keys:
                node: Any = current
                for part in key.split("_"):
                    node = node.get(part) if isinstance(node, dict) else None
                if node is not None and not isinstance(node, dict):
                    return node
                value = current.get(key)
                if value is not None and not isinstance(value, dict):
                    return value
            return None

        values = {
            "program": pick("program"),
            "shutdown_timeout": pick("shutdown_timeout", "timeout"),
            "poll_interval": pick("poll_interval", "interval"),
            "marker": pick("marker"),
            "marker_statement": pick("marker_statement", "statement"),
            "exit_directive": pick("exit_directive", "exit"),
            "abort_on_hang": pick("abort_on_hang", "abort"),
            "encoding": pick("encoding"),
        }
        kwargs = {k: v for k, v in values.items() if v is not None}

        for key in ("shutdown_timeout", "poll_interval"):
            if key in kwargs:
                try:
                    kwargs[key] = float(kwargs[key])
                except (TypeError, ValueError) as e:
                    raise ConfigError(
                        f"invalid value for session {key}", value=kwargs[key]
                    ) from e

        return cls(**kwargs)
