"""lutels CLI - lutels command."""

import click

from lutels.cli.check import check_command
from lutels.cli.resolve import resolve_command
from lutels.cli.serve import serve_command
from lutels.core.logging import configure_logging
from lutels.server import SERVER_VERSION


@click.group()
@click.version_option(version=SERVER_VERSION, prog_name="lutels")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """lutels - lute lint diagnostics and quick fixes for any LSP editor."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(check_command, name="check")
cli.add_command(resolve_command, name="resolve")


if __name__ == "__main__":
    cli()
