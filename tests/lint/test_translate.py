"""Tests for violation → diagnostic / quick-fix translation."""

from __future__ import annotations

from typing import Any

from lsprotocol import types as lsp

from lutels.lint.models import Violation
from lutels.lint.translate import translate_violation, translate_violations

URI = "file:///ws/main.luau"


def _lsp_range(sl: int, sc: int, el: int, ec: int) -> lsp.Range:
    return lsp.Range(
        start=lsp.Position(line=sl, character=sc), end=lsp.Position(line=el, character=ec)
    )


class TestTranslateViolation:
    """Tests for translate_violation."""

    def test_plain_violation(self, make_violation: Any) -> None:
        diagnostic, action = translate_violation(URI, Violation.model_validate(make_violation()))

        assert action is None
        assert diagnostic.range == _lsp_range(0, 10, 0, 11)
        assert diagnostic.message == "division by zero"
        assert diagnostic.severity == lsp.DiagnosticSeverity.Error
        assert diagnostic.code == "divide_by_zero"
        assert diagnostic.code_description is None
        assert diagnostic.source == "lute lint"
        assert diagnostic.tags is None

    def test_severity_passthrough(self, make_violation: Any) -> None:
        for value, expected in [
            (1, lsp.DiagnosticSeverity.Error),
            (2, lsp.DiagnosticSeverity.Warning),
            (3, lsp.DiagnosticSeverity.Information),
            (4, lsp.DiagnosticSeverity.Hint),
        ]:
            diagnostic, _ = translate_violation(
                URI, Violation.model_validate(make_violation(severity=value))
            )
            assert diagnostic.severity == expected

    def test_code_with_documentation_link(self, make_violation: Any) -> None:
        url = "https://example.com/lint/divide_by_zero"
        diagnostic, _ = translate_violation(
            URI, Violation.model_validate(make_violation(codeDescription=url))
        )
        assert diagnostic.code == "divide_by_zero"
        assert diagnostic.code_description == lsp.CodeDescription(href=url)

    def test_tags_copied(self, make_violation: Any) -> None:
        diagnostic, _ = translate_violation(
            URI, Violation.model_validate(make_violation(tags=[1, 2]))
        )
        assert diagnostic.tags == [lsp.DiagnosticTag.Unnecessary, lsp.DiagnosticTag.Deprecated]

    def test_suggested_fix(self, make_violation: Any, make_range: Any) -> None:
        violation = Violation.model_validate(
            make_violation(
                message="unused local",
                range=make_range(2, 6, 2, 7),
                suggestedfix={"fix": "_x", "range": make_range(2, 6, 2, 7)},
            )
        )

        diagnostic, stored = translate_violation(URI, violation)

        assert stored is not None
        action = stored.action
        assert action.title == "Fix: unused local"
        assert action.kind == lsp.CodeActionKind.QuickFix
        assert action.is_preferred is True
        assert action.diagnostics == [diagnostic]
        assert action.edit is not None
        assert action.edit.changes == {
            URI: [lsp.TextEdit(range=_lsp_range(2, 6, 2, 7), new_text="_x")]
        }

    def test_fix_anchor_is_violation_range(self, make_violation: Any, make_range: Any) -> None:
        """The edit span may differ; the anchor stays on the diagnostic."""
        violation = Violation.model_validate(
            make_violation(
                range=make_range(4, 0, 4, 12),
                suggestedfix={"fix": "", "range": make_range(3, 0, 5, 0)},
            )
        )

        diagnostic, stored = translate_violation(URI, violation)

        assert stored is not None
        assert stored.anchor == _lsp_range(4, 0, 4, 12)
        assert stored.anchor == diagnostic.range
        assert stored.action.edit is not None
        assert stored.action.edit.changes is not None
        (edit,) = stored.action.edit.changes[URI]
        assert edit.range == _lsp_range(3, 0, 5, 0)
        assert edit.new_text == ""


class TestTranslateViolations:
    """Tests for translate_violations."""

    def test_order_preserved(self, make_violation: Any, make_range: Any) -> None:
        violations = [
            Violation.model_validate(make_violation(code="a")),
            Violation.model_validate(
                make_violation(code="b", suggestedfix={"fix": "1", "range": make_range(0, 0, 0, 1)})
            ),
            Violation.model_validate(make_violation(code="c")),
            Violation.model_validate(
                make_violation(code="d", suggestedfix={"fix": "2", "range": make_range(0, 0, 0, 1)})
            ),
        ]

        diagnostics, actions = translate_violations(URI, violations)

        assert [d.code for d in diagnostics] == ["a", "b", "c", "d"]
        assert [s.action.diagnostics[0].code for s in actions] == ["b", "d"]

    def test_empty(self) -> None:
        assert translate_violations(URI, []) == ([], [])

    def test_duplicate_codes_not_deduplicated(self, make_violation: Any) -> None:
        violation = Violation.model_validate(make_violation())
        diagnostics, _ = translate_violations(URI, [violation, violation])
        assert len(diagnostics) == 2
