"""Core module exports."""

from apidiff.core.errors import (
    ApiDiffError,
    ConfigError,
    ErrorCode,
    PolicyError,
)
from apidiff.core.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    # Errors
    "ApiDiffError",
    "ConfigError",
    "ErrorCode",
    "PolicyError",
    # Logging
    "configure_logging",
    "get_logger",
]
