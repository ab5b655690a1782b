"""Entry point for ``python3 -m lutels``.

Usage::

    python3 -m lutels serve          # stdio language server
    python3 -m lutels check a.luau   # one-shot lint
"""

from lutels.cli.main import cli

if __name__ == "__main__":
    cli()
