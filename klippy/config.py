# config.py
# Registry defaults and protocol constants for klippy

import os

# =============================================================================
# Registry
# =============================================================================

DEFAULT_REGISTRY = "https://registry-1.docker.io"
DEFAULT_SCHEME = "https"
DEFAULT_TAG = "latest"

# Only pull scope is ever requested from a token issuer
TOKEN_SCOPE_ACTION = "pull"

# =============================================================================
# HTTP headers
# =============================================================================

API_VERSION_HEADER = "Docker-Distribution-API-Version"
AUTHENTICATE_HEADER = "WWW-Authenticate"
JSON_CONTENT_TYPE = "application/json"

# =============================================================================
# History decoding
# =============================================================================

# Prefix the builder puts in front of metadata-only instructions (LABEL, ENV, ...)
NOP_MARKER = "#(nop) "

# =============================================================================
# Logging
# =============================================================================

# Uses the 0=panic .. 5=debug numbering of the --log-level flag
DEFAULT_LOG_LEVEL = 4


def log_level_from_env() -> int:
    """Read KLIPPY_LOG_LEVEL, falling back to DEFAULT_LOG_LEVEL when unset or not a number."""
    try:
        return int(os.environ.get("KLIPPY_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    except ValueError:
        return DEFAULT_LOG_LEVEL
