"""Runtime state written back after toolchain discovery.

Runtime state is stored in .lutels/state.yaml (auto-generated, not
user-editable). It lets later sessions skip the foreman.toml lookup.
"""

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field

log = structlog.get_logger()

STATE_DIR = ".lutels"
STATE_FILE = "state.yaml"
CONFIG_FILE = "config.yaml"


class RuntimeState(BaseModel):
    """Auto-generated runtime state. NOT user-editable."""

    executable_path: str = Field(
        description="Linter executable found through the foreman toolchain.",
    )
    toolchain_manifest_directory: str = Field(
        description="Directory containing foreman.toml.",
    )


STATE_HEADER = """\
# AUTO-GENERATED - DO NOT EDIT MANUALLY
# Written by lutels after locating the linter through foreman.toml.
# Delete this file to force a fresh lookup.

"""


def state_path(workspace_root: Path) -> Path:
    return workspace_root / STATE_DIR / STATE_FILE


def write_runtime_state(path: Path, state: RuntimeState) -> None:
    """Write runtime state file with warning header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = state.model_dump()
    content = STATE_HEADER + yaml.dump(data, default_flow_style=False, sort_keys=False)
    path.write_text(content)


def load_runtime_state(path: Path) -> RuntimeState | None:
    """Load runtime state from YAML file. Unreadable state is ignored."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return RuntimeState(**data)
    except Exception as e:
        log.warning("runtime_state_ignored", path=str(path), error=str(e))
        return None
