"""YAML configuration with environment variable overrides."""

from .config import Config, load_config
from .constants import CONFIG_FILE_ENV, ENV_PREFIX, MAX_CONFIG_SIZE_BYTES

__all__ = [
    "Config",
    "load_config",
    "ENV_PREFIX",
    "CONFIG_FILE_ENV",
    "MAX_CONFIG_SIZE_BYTES",
]
