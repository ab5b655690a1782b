"""Config module exports."""

from lutels.config.loader import load_config
from lutels.config.models import (
    LintConfig,
    LoggingConfig,
    LutelsConfig,
)

__all__ = [
    "load_config",
    "LintConfig",
    "LoggingConfig",
    "LutelsConfig",
]
