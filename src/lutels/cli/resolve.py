"""lutels resolve command - show which linter executable would be used."""

import asyncio
import json
from pathlib import Path

import click

from lutels.cli.utils import load_cli_config
from lutels.lint.ops import LintOps


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resolve_command(path: Path, as_json: bool) -> None:
    """Resolve the linter toolchain for a workspace.

    PATH is the workspace root (default: current directory).
    """
    root = path.resolve()
    config = load_cli_config(root)
    ops = LintOps(config.lint, [root], lambda _uri, _diagnostics: None, persist_state=False)
    toolchain = asyncio.run(ops.ensure_toolchain())

    if toolchain is None:
        if as_json:
            click.echo(json.dumps({"found": False}))
            return
        raise click.ClickException("No linter executable found.")

    working_dir = toolchain.rule_config_directory or ops.config.toolchain_manifest_directory
    if as_json:
        click.echo(
            json.dumps(
                {
                    "found": True,
                    "executable": toolchain.executable_path,
                    "origin": toolchain.origin,
                    "working_directory": working_dir,
                }
            )
        )
        return

    click.echo(f"Executable: {toolchain.executable_path}")
    click.echo(f"Origin: {toolchain.origin}")
    if working_dir:
        click.echo(f"Working directory: {working_dir}")
