"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (SNIPE__SECTION__KEY)
3. User config ($XDG_CONFIG_HOME/snipe/config.yaml)
4. Built-in defaults (lowest priority)

The build variant is the one value read per checkout: BUILD_TYPE from the
working directory's .env file (or the environment).
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from snipe.config.constants import APP_NAME, CONFIG_FILE_NAME, DOTENV_FILE, ENV_PREFIX
from snipe.config.models import (
    CommandsConfig,
    EnvConfig,
    ExecutionConfig,
    IndexConfig,
    LoggingConfig,
    ScanConfig,
    SnipeConfig,
)
from snipe.core.errors import ConfigError


def _xdg_dir(env_var: str, fallback: str) -> Path:
    base = os.environ.get(env_var)
    root = Path(base) if base else Path.home() / fallback
    return root / APP_NAME


def get_config_dir() -> Path:
    """$XDG_CONFIG_HOME/snipe, defaulting to ~/.config/snipe."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """$XDG_DATA_HOME/snipe, defaulting to ~/.local/share/snipe."""
    return _xdg_dir("XDG_DATA_HOME", ".local/share")


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


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
    """Create a Settings class bound to one YAML document."""

    class SnipeSettings(BaseSettings):
        """Root config. Env vars: SNIPE__LOGGING__LEVEL, SNIPE__SCAN__CC_TEST_ROOT, etc."""

        model_config = SettingsConfigDict(
            env_prefix=ENV_PREFIX,
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        scan: ScanConfig = ScanConfig()
        commands: CommandsConfig = CommandsConfig()
        env: EnvConfig = EnvConfig()
        execution: ExecutionConfig = ExecutionConfig()
        index: IndexConfig = IndexConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return SnipeSettings


def load_config(config_path: Path | None = None, **kwargs: Any) -> SnipeConfig:
    """Load config: defaults < YAML file < env vars < kwargs.

    Args:
        config_path: YAML file to read. Defaults to the user config path.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    path = config_path or get_config_path()
    yaml_config = _load_yaml(path)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return SnipeConfig.model_validate(settings.model_dump())


class BuildSettings(BaseSettings):
    """Per-checkout build settings read from .env and the environment."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE,
        case_sensitive=False,
        extra="ignore",
    )

    build_type: str | None = None


def load_build_type(default: str, env_file: Path | None = None) -> str:
    """Return BUILD_TYPE from the environment or .env, else ``default``."""
    try:
        settings = BuildSettings(_env_file=env_file or DOTENV_FILE)  # type: ignore[call-arg]
    except ValidationError:
        return default
    return settings.build_type or default


def get_index_dir(config: SnipeConfig) -> Path:
    """Directory holding the persisted indexes, respecting index.index_dir."""
    if config.index.index_dir:
        return Path(config.index.index_dir).expanduser()
    return get_data_dir()
