"""
Configuration-related constants and resource limits.
"""

# Maximum config file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

# Prefix for environment variable overrides
ENV_PREFIX = "TESTKIT_"

# Environment variable naming the default config file
CONFIG_FILE_ENV = "TESTKIT_CONFIG_FILE"
