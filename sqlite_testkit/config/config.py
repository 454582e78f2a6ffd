"""
Configuration loading for sqlite-testkit.

Config wraps a YAML file (loaded with yaml.safe_load) and layers environment
variable overrides on top of it, so that CI can tune timeouts or point at a
different sqlite3 binary without editing files.

Environment Variable Override Format:
    TESTKIT_<SECTION>_<KEY>=value

Examples:
    TESTKIT_SESSION_PROGRAM=/opt/sqlite/bin/sqlite3
    TESTKIT_SESSION_TIMEOUT=5
    TESTKIT_LOGGING_LEVEL=debug
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..exceptions import ConfigError
from .constants import CONFIG_FILE_ENV, ENV_PREFIX, MAX_CONFIG_SIZE_BYTES


def _check_file_size(fname_path: Path) -> None:
    """Reject oversized config files before parsing them."""
    file_size = os.path.getsize(fname_path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            f"Configuration file '{fname_path}' is {file_size} bytes, "
            f"exceeding maximum size of {MAX_CONFIG_SIZE_BYTES} bytes"
        )


def _convert_env_value(value: str) -> Any:
    """
    Convert environment variable string to appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        None, bool, list, int, float or the original string
    """
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    if "," in value:
        return [_convert_env_value(v.strip()) for v in value.split(",")]

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value


class Config:
    """
    Configuration loaded from a YAML file with environment variable overrides.

    Values are reached with dotted paths:

        config = Config("etc/testkit.yaml")
        timeout = config.get("session.timeout", 60)

    A Config can also be built without a file, in which case it holds only
    the environment overrides.
    """

    def __init__(
        self,
        fname: str | Path | None = None,
        enable_env_overrides: bool = True,
        env_prefix: str = ENV_PREFIX,
    ):
        """
        Initialize configuration.

        Args:
            fname: Path to the YAML configuration file, or None
            enable_env_overrides: Whether to apply environment variable overrides
            env_prefix: Prefix for environment variables (default: 'TESTKIT_')

        Raises:
            ConfigError: If the file is missing, too large or not valid YAML
        """
        self._enable_env_overrides = enable_env_overrides
        self._env_prefix = env_prefix
        self._path = Path(fname).resolve() if fname is not None else None
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path | None:
        """Resolved path of the loaded file, if any."""
        return self._path

    def _load(self) -> None:
        data: Any = {}
        if self._path is not None:
            if not self._path.is_file():
                raise ConfigError("Configuration file not found", path=self._path)
            _check_file_size(self._path)
            with open(self._path) as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in '{self._path}': {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(
                    "Configuration root must be a mapping", path=self._path
                )

        if self._enable_env_overrides:
            data = self._apply_env_overrides(data)
        self._data = data

    def reload(self) -> "Config":
        """Re-read the file and re-apply environment overrides."""
        self._load()
        return self

    def _collect_env_vars(self) -> dict[str, str]:
        """Collect all environment variables with the configured prefix."""
        return {
            key: value
            for key, value in os.environ.items()
            if key.startswith(self._env_prefix) and key != CONFIG_FILE_ENV
        }

    def _env_key_to_path(self, env_key: str) -> list[str]:
        """Convert TESTKIT_SESSION_TIMEOUT to ['session', 'timeout']."""
        return env_key[len(self._env_prefix) :].lower().split("_")

    def _apply_env_overrides(self, data: dict[str, Any]) -> dict[str, Any]:
        for env_key, env_value in self._collect_env_vars().items():
            path = self._env_key_to_path(env_key)
            current = data
            for part in path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[path[-1]] = _convert_env_value(env_value)
        return data

    def get_env_overrides(self) -> dict[str, Any]:
        """Map of dotted path to value for every override that applies."""
        if not self._enable_env_overrides:
            return {}
        return {
            ".".join(self._env_key_to_path(k)): _convert_env_value(v)
            for k, v in self._collect_env_vars().items()
        }

    def has(self, key: str) -> bool:
        """Check whether a dotted path exists."""
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value by dotted path.

        Args:
            key: Dotted path such as 'session.timeout'
            default: Returned when any path component is missing
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def dict(self) -> dict[str, Any]:
        """The configuration as a plain dictionary."""
        return self._data

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"Config(path={self._path!r})"


def load_config(fname: str | Path | None = None) -> Config:
    """
    Load the default configuration.

    Uses fname if given, otherwise the file named by TESTKIT_CONFIG_FILE if
    that variable is set, otherwise only environment overrides.
    """
    if fname is None:
        fname = os.environ.get(CONFIG_FILE_ENV) or None
    return Config(fname)
