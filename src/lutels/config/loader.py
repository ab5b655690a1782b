"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority; editor settings arrive this way)
2. Environment variables (LUTELS__SECTION__KEY)
3. Workspace config (.lutels/config.yaml)
4. Runtime state (.lutels/state.yaml) - auto-generated, not user-editable
5. Global config (~/.config/lutels/config.yaml)
6. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lutels.config.models import LintConfig, LoggingConfig, LutelsConfig
from lutels.config.user_config import CONFIG_FILE, STATE_DIR, load_runtime_state, state_path
from lutels.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/lutels/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class LutelsSettings(BaseSettings):
        """Root config. Env vars: LUTELS__LOGGING__LEVEL, LUTELS__LINT__EXECUTABLE_PATH, etc."""

        model_config = SettingsConfigDict(
            env_prefix="LUTELS__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        lint: LintConfig = LintConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return LutelsSettings


def load_config(workspace_root: Path | None = None, **kwargs: Any) -> LutelsConfig:
    """Load config: defaults < global < state < workspace config < env vars < kwargs.

    Args:
        workspace_root: Workspace folder whose .lutels/ directory is read.
                        None skips the workspace and state files.
        **kwargs: Override values (highest precedence), e.g. lint={"rule_config_path": ...}.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)

    if workspace_root is not None:
        state = load_runtime_state(state_path(workspace_root))
        if state:
            yaml_config = _deep_merge(yaml_config, {"lint": state.model_dump()})
        workspace_config = _load_yaml(workspace_root / STATE_DIR / CONFIG_FILE)
        yaml_config = _deep_merge(yaml_config, workspace_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        return settings_cls(**kwargs)  # type: ignore[return-value]
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
