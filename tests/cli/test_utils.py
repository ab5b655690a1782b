"""Tests for CLI utilities."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import click
import pytest

from lutels.cli.utils import load_cli_config


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path) -> Generator[None, None, None]:
    with patch("lutels.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield


class TestLoadCliConfig:
    """Tests for load_cli_config function."""

    def test_no_overrides(self, tmp_path: Path) -> None:
        config = load_cli_config(tmp_path)
        assert config.lint.executable_path == ""

    def test_overrides_win_over_workspace_file(self, tmp_path: Path) -> None:
        (tmp_path / ".lutels").mkdir()
        (tmp_path / ".lutels" / "config.yaml").write_text(
            "lint:\n  executable_path: /from/file\n  rule_config_path: file.luau\n"
        )

        config = load_cli_config(tmp_path, executable="/from/cli")

        assert config.lint.executable_path == "/from/cli"
        assert config.lint.rule_config_path == "file.luau"

    def test_rules_override(self, tmp_path: Path) -> None:
        config = load_cli_config(tmp_path, rules="rules.luau")
        assert config.lint.rule_config_path == "rules.luau"

    def test_invalid_config_becomes_click_exception(self, tmp_path: Path) -> None:
        (tmp_path / ".lutels").mkdir()
        (tmp_path / ".lutels" / "config.yaml").write_text("lint: [not, a, mapping\n")

        with pytest.raises(click.ClickException, match="CONFIG_PARSE_ERROR"):
            load_cli_config(tmp_path)
