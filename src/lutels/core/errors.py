"""lutels error types with typed error codes.

Error code ranges:
- 1xxx: Toolchain resolution
- 2xxx: Linter invocation
- 3xxx: Config
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Toolchain (1xxx)
    TOOLCHAIN_NOT_FOUND = 1001

    # Invocation (2xxx)
    INVOCATION_EXIT_STATUS = 2001
    INVOCATION_BAD_OUTPUT = 2002
    INVOCATION_SPAWN_FAILED = 2003
    INVOCATION_TIMEOUT = 2004
    MALFORMED_VIOLATION = 2101

    # Config (3xxx)
    CONFIG_PARSE_ERROR = 3001
    CONFIG_INVALID_VALUE = 3002


@dataclass(frozen=True, slots=True)
class LutelsError(Exception):
    """Base error with structured context for log records."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'TOOLCHAIN_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ToolchainNotFoundError(LutelsError):
    """No usable linter executable could be located."""

    @classmethod
    def bundled_missing(cls, path: str) -> "ToolchainNotFoundError":
        return cls(
            code=ErrorCode.TOOLCHAIN_NOT_FOUND,
            message=f"No linter executable found; bundled fallback missing at {path}",
            details={"bundled_path": path},
        )


class InvocationError(LutelsError):
    """A single linter run failed; the run contributes no violations."""

    @classmethod
    def exit_status(cls, returncode: int, stderr: str) -> "InvocationError":
        return cls(
            code=ErrorCode.INVOCATION_EXIT_STATUS,
            message=f"Linter exited with status {returncode}",
            details={"returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def bad_output(cls, reason: str) -> "InvocationError":
        return cls(
            code=ErrorCode.INVOCATION_BAD_OUTPUT,
            message=f"Linter output is not a JSON array: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def spawn_failed(cls, executable: str, reason: str) -> "InvocationError":
        return cls(
            code=ErrorCode.INVOCATION_SPAWN_FAILED,
            message=f"Could not start {executable}: {reason}",
            details={"executable": executable, "reason": reason},
        )

    @classmethod
    def timed_out(cls, executable: str, timeout_sec: float) -> "InvocationError":
        return cls(
            code=ErrorCode.INVOCATION_TIMEOUT,
            message=f"{executable} did not finish within {timeout_sec}s",
            details={"executable": executable, "timeout_sec": timeout_sec},
        )


class MalformedViolationError(InvocationError):
    """A violation record in the batch is missing or mistypes a field."""

    @classmethod
    def from_validation(cls, index: int | None, reason: str) -> "MalformedViolationError":
        where = f"record {index}" if index is not None else "batch"
        return cls(
            code=ErrorCode.MALFORMED_VIOLATION,
            message=f"Malformed violation in {where}: {reason}",
            details={"index": index, "reason": reason},
        )


class ConfigError(LutelsError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )
