"""
Configuration constants for node identifier minting and risk analysis.

Digest sizing can be overridden from the environment (a .env file is
loaded at import time via python-dotenv). Changing the digest length
changes every hashed identifier minted afterwards, so it must be fixed per
deployment.
"""

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Load .env file (idempotent; does nothing if already loaded or missing)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Digest configuration for paramHash / pathHash fields
# ---------------------------------------------------------------------------
MIN_DIGEST_LENGTH: int = 8
MAX_DIGEST_LENGTH: int = 40  # full SHA-1 hex digest
FALLBACK_DIGEST_LENGTH: int = 16


def _env_digest_length(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", name, raw, default)
        return default
    return max(MIN_DIGEST_LENGTH, min(value, MAX_DIGEST_LENGTH))


DEFAULT_DIGEST_LENGTH: int = _env_digest_length(
    "NODE_ID_DIGEST_LENGTH", FALLBACK_DIGEST_LENGTH
)

# Canonical text hashed for a method with no parameters.
EMPTY_PARAMETER_SIGNATURE: str = "()"

# Type name used when a field or parameter type is missing.
DEFAULT_TYPE_NAME: str = "Object"

# ---------------------------------------------------------------------------
# Collision risk thresholds (lengths are in characters)
# ---------------------------------------------------------------------------
SHORT_HASH_LENGTH: int = 8
DEFAULT_PACKAGE_SHORT_CLASS_NAME: int = 3
SHORT_CLASS_NAME: int = 2
SHORT_METHOD_NAME: int = 2
SHORT_FIELD_NAME: int = 2
SHORT_REPOSITORY_NAME: int = 3
SHORT_ANNOTATION_NAME: int = 5
MIN_PACKAGE_SEGMENTS: int = 2
