"""Locate the linter executable.

Resolution order, first success wins:

1. An explicit executable path from configuration, used verbatim.
2. A ``foreman.toml`` manifest at the top level of a workspace root, with the
   linter installed at the foreman default location under the user's home.
3. Nothing: callers fall back to the bundled executable.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog

from lutels.lint.models import ResolvedToolchain

log = structlog.get_logger()

MANIFEST_NAME = "foreman.toml"
BINARY_NAME = "lute"

# Relative to the user's home directory (HOME, or USERPROFILE on Windows).
FOREMAN_BIN_SUBPATH = Path(".foreman") / "bin" / BINARY_NAME


def foreman_binary_path(home: Path | None = None) -> Path:
    """Default install location of the foreman-managed linter."""
    return (home or Path.home()) / FOREMAN_BIN_SUBPATH


def bundled_binary_path() -> Path:
    """Executable shipped inside the installed package."""
    name = f"{BINARY_NAME}.exe" if sys.platform == "win32" else BINARY_NAME
    return Path(__file__).resolve().parent.parent / "bin" / name


def _find_manifest(workspace_roots: Sequence[Path]) -> Path | None:
    for root in workspace_roots:
        candidate = root / MANIFEST_NAME
        if candidate.is_file():
            return candidate.absolute()
    return None


async def resolve_toolchain(
    explicit_path: str,
    workspace_roots: Sequence[Path],
    *,
    home: Path | None = None,
) -> ResolvedToolchain | None:
    """Resolve the linter executable; None means "use the bundled binary".

    Args:
        explicit_path: Configured executable path; empty when unset
        workspace_roots: Workspace folders, searched in declaration order
        home: Home directory override (defaults to ``Path.home()``)
    """
    if explicit_path:
        return ResolvedToolchain(executable_path=explicit_path, origin="explicit")

    log.info("toolchain_explicit_path_unset", next_step="foreman")

    if not workspace_roots:
        log.info("toolchain_no_workspace_roots")
        return None

    log.info("toolchain_manifest_search", manifest=MANIFEST_NAME, roots=len(workspace_roots))
    manifest = await asyncio.to_thread(_find_manifest, workspace_roots)
    if manifest is None:
        log.info("toolchain_manifest_not_found", manifest=MANIFEST_NAME)
        return None

    binary = foreman_binary_path(home)
    log.info("toolchain_manifest_found", manifest=str(manifest), expected_binary=str(binary))
    if not await asyncio.to_thread(binary.is_file):
        log.info("toolchain_binary_missing", expected_binary=str(binary))
        return None

    log.info("toolchain_binary_found", executable=str(binary))
    return ResolvedToolchain(
        executable_path=str(binary),
        rule_config_directory=str(manifest.parent),
        origin="foreman",
    )
