"""
Configuration constants and resource limits.
"""

# Maximum settings file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

ENV_PREFIX = "CALLTRACE_"

# Top-level YAML section holding the settings
SECTION = "calltrace"
