"""Translate linter violations into LSP diagnostics and quick fixes."""

from __future__ import annotations

from collections.abc import Iterable

from lsprotocol import types as lsp

from lutels.lint.models import StoredAction, Violation


def _diagnostic(violation: Violation) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=violation.range.to_lsp(),
        message=violation.message,
        severity=lsp.DiagnosticSeverity(int(violation.severity)),
        code=violation.code,
        code_description=(
            lsp.CodeDescription(href=violation.code_description)
            if violation.code_description
            else None
        ),
        source=violation.source,
        tags=list(violation.tags) if violation.tags is not None else None,
    )


def translate_violation(
    uri: str, violation: Violation
) -> tuple[lsp.Diagnostic, StoredAction | None]:
    """Build the diagnostic for ``violation`` and, if it carries a fix, its action.

    The action edits the fix's own range but is anchored on the violation's
    range, which is what code-action lookups intersect against.
    """
    diagnostic = _diagnostic(violation)
    fix = violation.suggested_fix
    if fix is None:
        return diagnostic, None

    action = lsp.CodeAction(
        title=f"Fix: {violation.message}",
        kind=lsp.CodeActionKind.QuickFix,
        diagnostics=[diagnostic],
        is_preferred=True,
        edit=lsp.WorkspaceEdit(
            changes={uri: [lsp.TextEdit(range=fix.range.to_lsp(), new_text=fix.fix)]}
        ),
    )
    return diagnostic, StoredAction(action=action, anchor=diagnostic.range)


def translate_violations(
    uri: str, violations: Iterable[Violation]
) -> tuple[list[lsp.Diagnostic], list[StoredAction]]:
    """Translate a batch, keeping violation order for both outputs."""
    diagnostics: list[lsp.Diagnostic] = []
    actions: list[StoredAction] = []
    for violation in violations:
        diagnostic, action = translate_violation(uri, violation)
        diagnostics.append(diagnostic)
        if action is not None:
            actions.append(action)
    return diagnostics, actions
