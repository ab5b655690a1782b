"""lutels serve command - run the language server."""

import click

from lutels.config.loader import load_config
from lutels.core.errors import ConfigError
from lutels.core.logging import configure_logging
from lutels.server import start_io, start_tcp


@click.command()
@click.option("--tcp", is_flag=True, help="Listen on TCP instead of stdio")
@click.option("--host", default="127.0.0.1", show_default=True, help="TCP bind address")
@click.option("--port", default=2087, show_default=True, type=int, help="TCP port")
@click.pass_context
def serve_command(ctx: click.Context, tcp: bool, host: str, port: int) -> None:
    """Start the language server (stdio by default)."""
    try:
        config = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    if tcp:
        start_tcp(host, port)
    else:
        start_io()
