"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (editor settings)
2. Environment variables (LUTELS__SECTION__KEY)
3. Workspace YAML (.lutels/config.yaml)
4. Runtime state (.lutels/state.yaml, written after toolchain discovery)
5. Global YAML (~/.config/lutels/config.yaml)
6. Built-in defaults (this file)

Environment Variable Format:
    LUTELS__<SECTION>__<KEY>=<VALUE>

Examples:
    LUTELS__LOGGING__LEVEL=DEBUG
    LUTELS__LINT__EXECUTABLE_PATH=/opt/lute/bin/lute
    LUTELS__LINT__RULE_CONFIG_PATH=${workspaceFolder}/lint.config.luau
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v == "stderr":
            return v
        if v == "stdout":
            raise ValueError("stdout carries the LSP stream and cannot receive logs")
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LUTELS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG includes full linter command lines.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LintConfig(BaseModel):
    """Linter integration configuration.

    Env vars:
        LUTELS__LINT__EXECUTABLE_PATH: Explicit linter executable
        LUTELS__LINT__RULE_CONFIG_PATH: Custom rule file for a second lint pass
        LUTELS__LINT__TIMEOUT_SEC: Kill the linter after this many seconds
    """

    executable_path: str = Field(
        default="",
        description="Explicit linter executable. Empty means discover via foreman.toml, "
        "then fall back to the bundled binary.",
    )
    rule_config_path: str = Field(
        default="",
        description="Custom rule-config file. May be relative to the workspace folder "
        "or contain ${workspaceFolder}. Empty disables the second lint pass.",
    )
    toolchain_manifest_directory: str | None = Field(
        default=None,
        description="Directory holding foreman.toml; used as the linter's working "
        "directory. Written back automatically after discovery.",
    )
    bundled_executable: str | None = Field(
        default=None,
        description="Override for the bundled fallback executable location.",
    )
    languages: list[str] = Field(
        default_factory=lambda: ["luau", "lua"],
        description="Language ids that are linted. Other documents are ignored.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Kill a linter run after this many seconds. None waits indefinitely.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class LutelsConfig(BaseModel):
    """Root configuration for lutels."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    lint: LintConfig = Field(default_factory=LintConfig)
