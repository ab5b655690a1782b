"""Lint models - violations decoded from linter JSON and lint results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Literal, Protocol

from lsprotocol import types as lsp
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(IntEnum):
    """Diagnostic severity, numbered as the linter emits it (LSP numbering)."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


class _Point(Protocol):
    line: int
    character: int


class _Span(Protocol):
    @property
    def start(self) -> _Point: ...

    @property
    def end(self) -> _Point: ...


def _key(point: _Point) -> tuple[int, int]:
    return (point.line, point.character)


def ranges_intersect(a: _Span, b: _Span) -> bool:
    """True when the closed position intervals of ``a`` and ``b`` share a position.

    Works for both ``Range`` and ``lsprotocol.types.Range``. Touching ranges
    and zero-width ranges at a covered position intersect.
    """
    return _key(a.start) <= _key(b.end) and _key(b.start) <= _key(a.end)


class Position(BaseModel):
    """Zero-based line and UTF-16 character offset."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)

    def to_lsp(self) -> lsp.Position:
        return lsp.Position(line=self.line, character=self.character)


class Range(BaseModel):
    """Span between two positions; ``start`` never lies after ``end``."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @model_validator(mode="after")
    def check_order(self) -> Range:
        if _key(self.start) > _key(self.end):
            raise ValueError(
                f"range start {_key(self.start)} is after end {_key(self.end)}"
            )
        return self

    def to_lsp(self) -> lsp.Range:
        return lsp.Range(start=self.start.to_lsp(), end=self.end.to_lsp())


class SuggestedFix(BaseModel):
    """Literal replacement text and the span it replaces."""

    model_config = ConfigDict(frozen=True)

    fix: str
    range: Range


class Violation(BaseModel):
    """One finding reported by the linter.

    Field names follow the linter's JSON; unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    range: Range
    severity: Severity
    code: str
    source: str
    message: str
    code_description: str | None = Field(default=None, alias="codeDescription")
    tags: list[int] | None = None
    suggested_fix: SuggestedFix | None = Field(default=None, alias="suggestedfix")


@dataclass(frozen=True)
class ResolvedToolchain:
    """Linter executable plus the directory it should run in."""

    executable_path: str
    rule_config_directory: str | None = None
    origin: Literal["explicit", "foreman", "bundled"] = "explicit"


@dataclass(frozen=True)
class StoredAction:
    """A quick fix indexed by the range of the diagnostic it repairs."""

    action: lsp.CodeAction
    anchor: lsp.Range


@dataclass
class LintOutcome:
    """Result of one published lint cycle for a document."""

    uri: str
    generation: int
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    actions: list[StoredAction] = field(default_factory=list)
    invocations: int = 0

    @property
    def has_errors(self) -> bool:
        return any(d.severity == lsp.DiagnosticSeverity.Error for d in self.diagnostics)
