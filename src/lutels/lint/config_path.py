"""Turn a user-supplied rule-config path into an absolute path."""

from __future__ import annotations

import os
from pathlib import Path

WORKSPACE_PLACEHOLDER = "${workspaceFolder}"


def resolve_config_path(raw_path: str, workspace_root: Path | str | None = None) -> str:
    """Resolve ``raw_path`` against ``workspace_root``. Never touches the filesystem.

    - ``${workspaceFolder}`` is replaced by the workspace root when one is given.
    - Absolute paths are returned unchanged.
    - Relative paths are joined to the workspace root and normalized.
    - Without a workspace root a relative path comes back as-is.
    """
    root = os.fspath(workspace_root) if workspace_root is not None else None

    path = raw_path
    if root is not None and WORKSPACE_PLACEHOLDER in path:
        path = path.replace(WORKSPACE_PLACEHOLDER, root)

    if os.path.isabs(path):
        return path
    if root is None:
        return path
    return os.path.normpath(os.path.join(root, path))
