"""Lint module - linter resolution, invocation, translation and quick fixes."""

from lutels.lint.config_path import resolve_config_path
from lutels.lint.invoker import invoke_linter
from lutels.lint.models import (
    LintOutcome,
    ResolvedToolchain,
    Severity,
    StoredAction,
    Violation,
    ranges_intersect,
)
from lutels.lint.ops import LintOps
from lutels.lint.registry import ActionRegistry
from lutels.lint.toolchain import resolve_toolchain
from lutels.lint.translate import translate_violation, translate_violations

__all__ = [
    "ActionRegistry",
    "LintOps",
    "LintOutcome",
    "ResolvedToolchain",
    "Severity",
    "StoredAction",
    "Violation",
    "invoke_linter",
    "ranges_intersect",
    "resolve_config_path",
    "resolve_toolchain",
    "translate_violation",
    "translate_violations",
]
