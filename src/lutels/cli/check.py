"""lutels check command - lint files once from the terminal."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from lsprotocol import types as lsp
from rich.console import Console
from rich.table import Table

from lutels.cli.utils import load_cli_config
from lutels.lint.models import LintOutcome
from lutels.lint.ops import LintOps

_SUFFIX_LANGUAGES = {".luau": "luau", ".lua": "lua"}

_SEVERITY_STYLES = {
    lsp.DiagnosticSeverity.Error: ("error", "red"),
    lsp.DiagnosticSeverity.Warning: ("warning", "yellow"),
    lsp.DiagnosticSeverity.Information: ("info", "cyan"),
    lsp.DiagnosticSeverity.Hint: ("hint", "dim"),
}


async def _lint_files(ops: LintOps, files: list[Path]) -> list[LintOutcome] | None:
    if await ops.ensure_toolchain() is None:
        return None
    outcomes: list[LintOutcome] = []
    for path in files:
        outcome = await ops.lint_document(
            path.resolve().as_uri(),
            path.read_text(encoding="utf-8"),
            _SUFFIX_LANGUAGES.get(path.suffix),
        )
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def _fixable(outcome: LintOutcome) -> set[int]:
    """ids of diagnostics that have a quick fix."""
    return {
        id(diagnostic)
        for stored in outcome.actions
        for diagnostic in stored.action.diagnostics or []
    }


def _outcome_dict(path: Path, outcome: LintOutcome) -> dict[str, Any]:
    fixable = _fixable(outcome)
    return {
        "path": str(path),
        "diagnostics": [
            {
                "line": d.range.start.line + 1,
                "column": d.range.start.character + 1,
                "severity": int(d.severity or lsp.DiagnosticSeverity.Error),
                "code": d.code,
                "message": d.message,
                "fixable": id(d) in fixable,
            }
            for d in outcome.diagnostics
        ],
    }


def _render(console: Console, path: Path, outcome: LintOutcome) -> None:
    if not outcome.diagnostics:
        console.print(f"[green]✓[/green] {path}")
        return
    fixable = _fixable(outcome)
    table = Table(title=str(path), title_justify="left", show_edge=False)
    table.add_column("Location", style="dim")
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Message")
    table.add_column("Fix", justify="center")
    for d in outcome.diagnostics:
        label, style = _SEVERITY_STYLES[d.severity or lsp.DiagnosticSeverity.Error]
        table.add_row(
            f"{d.range.start.line + 1}:{d.range.start.character + 1}",
            f"[{style}]{label}[/{style}]",
            str(d.code or ""),
            d.message,
            "✓" if id(d) in fixable else "",
        )
    console.print(table)


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory)",
)
@click.option("--executable", "-e", default=None, help="Linter executable to use")
@click.option("--rules", "-r", default=None, help="Rule-config file for a second lint pass")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check_command(
    files: tuple[Path, ...],
    workspace: Path | None,
    executable: str | None,
    rules: str | None,
    as_json: bool,
) -> None:
    """Lint FILES and print their diagnostics.

    Exits with status 1 when any error-severity diagnostic is reported.
    """
    root = (workspace or Path.cwd()).resolve()
    config = load_cli_config(root, executable=executable, rules=rules)

    paths = list(files)
    ops = LintOps(config.lint, [root], lambda _uri, _diagnostics: None, persist_state=False)
    outcomes = asyncio.run(_lint_files(ops, paths))
    if outcomes is None:
        raise click.ClickException(
            "No linter executable found. Set lint.executable_path or pass --executable."
        )

    by_uri = {p.resolve().as_uri(): p for p in paths}
    if as_json:
        click.echo(json.dumps([_outcome_dict(by_uri[o.uri], o) for o in outcomes], indent=2))
    else:
        console = Console()
        for outcome in outcomes:
            _render(console, by_uri[outcome.uri], outcome)

    if any(o.has_errors for o in outcomes):
        raise SystemExit(1)
