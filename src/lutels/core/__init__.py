"""Core module exports."""

from lutels.core.errors import (
    ConfigError,
    ErrorCode,
    InvocationError,
    LutelsError,
    MalformedViolationError,
    ToolchainNotFoundError,
)
from lutels.core.logging import (
    clear_lint_id,
    configure_logging,
    get_lint_id,
    lint_cycle,
    set_lint_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InvocationError",
    "LutelsError",
    "MalformedViolationError",
    "ToolchainNotFoundError",
    # Logging
    "clear_lint_id",
    "configure_logging",
    "get_lint_id",
    "lint_cycle",
    "set_lint_id",
]
