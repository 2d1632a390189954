"""
Global configuration for uuidharvest.
Only infrastructure knobs live here (URLs, timeouts, pacing, batch sizes).
Everything overridable is read from the environment (or a local .env).
"""

from __future__ import annotations

import os
from typing import Final, Optional

from dotenv import load_dotenv

load_dotenv()

# -----------------------------------------------------------------------------
# Remote lookup service
# -----------------------------------------------------------------------------
API_URL: Final[str] = os.getenv(
    "UUIDHARVEST_API_URL", "https://mowojang.matdoes.dev"
)
USER_AGENT: Final[str] = os.getenv("UUIDHARVEST_USER_AGENT", "uuidharvest")
DEFAULT_TIMEOUT_S: Final[float] = float(
    os.getenv("UUIDHARVEST_TIMEOUT_S", "30")
)

# The service rejects bulk lookups above this size.
MAX_BATCH_SIZE: Final[int] = 10
# Candidates expanded with suffixes at a time, per worker.
GROUP_SIZE: Final[int] = 100

# -----------------------------------------------------------------------------
# Run defaults
# -----------------------------------------------------------------------------
DEFAULT_THREADS: Final[int] = int(
    os.getenv("UUIDHARVEST_DEFAULT_THREADS", "80")
)
STATUS_INTERVAL_S: Final[float] = float(
    os.getenv("UUIDHARVEST_STATUS_INTERVAL_S", "1.0")
)


def get_env(
    name: str, *, required: bool = False, default: Optional[str] = None
) -> Optional[str]:
    """Small helper to fetch env vars with an optional 'required' flag."""
    val = os.getenv(name, default)
    if required and not val:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val


# -----------------------------------------------------------------------------
# Public exports
# -----------------------------------------------------------------------------
__all__ = [
    "API_URL",
    "USER_AGENT",
    "DEFAULT_TIMEOUT_S",
    "MAX_BATCH_SIZE",
    "GROUP_SIZE",
    "DEFAULT_THREADS",
    "STATUS_INTERVAL_S",
    "get_env",
]
