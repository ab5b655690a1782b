"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from lutels.config.loader import load_config
from lutels.config.models import LutelsConfig
from lutels.core.errors import ConfigError


def load_cli_config(
    workspace_root: Path,
    *,
    executable: str | None = None,
    rules: str | None = None,
) -> LutelsConfig:
    """Load config for a workspace, applying command-line overrides.

    Raises:
        click.ClickException: If the configuration is invalid
    """
    lint_overrides: dict[str, Any] = {}
    if executable:
        lint_overrides["executable_path"] = executable
    if rules:
        lint_overrides["rule_config_path"] = rules

    kwargs: dict[str, Any] = {"lint": lint_overrides} if lint_overrides else {}
    try:
        return load_config(workspace_root, **kwargs)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
