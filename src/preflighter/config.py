from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from preflighter.constants import (
    DEFAULT_CHECK_TIMEOUT,
    DEFAULT_ENV_COMMAND_TIMEOUT,
    DEFAULT_RUNBOOK_RETRIES,
    DEFAULT_RUNBOOK_RETRY_DELAY,
    DEFAULT_RUNBOOK_TIMEOUT,
    DEFAULT_SHELL,
)
from preflighter.exceptions import ConfigError
from preflighter.logging import get_logger

__all__ = [
    "PreflighterConfig",
    "RunbookConfig",
    "ExecutionConfig",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_FILENAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_FILENAME = "preflighter.yaml"


class RunbookConfig(BaseModel):
    """Settings for the remote runbook tracking service.

    Attributes:
        url: Base URL of the runbook service. Required only when a checklist
            references runbook steps or runbook-linked items.
        token: Optional bearer token sent with every request.
        timeout_seconds: Total timeout per HTTP request.
        max_retries: Retries for transient failures (timeouts, 429, 5xx).
        retry_delay: Base delay for exponential backoff between retries.
    """

    url: str | None = None
    token: str | None = None
    timeout_seconds: float = Field(default=DEFAULT_RUNBOOK_TIMEOUT, gt=0.0, le=300.0)
    max_retries: int = Field(default=DEFAULT_RUNBOOK_RETRIES, ge=0, le=10)
    retry_delay: float = Field(default=DEFAULT_RUNBOOK_RETRY_DELAY, ge=0.0, le=30.0)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None


class ExecutionConfig(BaseModel):
    """Settings for executing markers and automated checks.

    Attributes:
        check_timeout: Default timeout for one automated check in seconds.
        env_command_timeout: Timeout for one ``${command}`` marker in seconds.
        shell: Shell used for markers and as the default check interpreter.
        temp_dir: Default directory for temporary artifacts (``--temp``
            overrides it). Artifacts in a configured directory are kept.
    """

    check_timeout: float = Field(default=DEFAULT_CHECK_TIMEOUT, gt=0.0)
    env_command_timeout: float = Field(default=DEFAULT_ENV_COMMAND_TIMEOUT, gt=0.0)
    shell: str = Field(default=DEFAULT_SHELL, min_length=1)
    temp_dir: Path | None = None


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that loads values from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class PreflighterConfig(BaseSettings):
    """Root configuration object containing all Preflighter settings."""

    model_config = SettingsConfigDict(
        env_prefix="PREFLIGHTER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    runbook: RunbookConfig = Field(default_factory=RunbookConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init settings (explicit keyword arguments)
        2. Environment variables (PREFLIGHTER_*)
        3. Project YAML config (./preflighter.yaml or --config)
        4. User YAML config (~/.config/preflighter/config.yaml)
        """
        project_config_path = (
            _project_config_path.get() or Path.cwd() / PROJECT_CONFIG_FILENAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


# Project config path chosen by load_config() for the settings sources hook.
_project_config_path: ContextVar[Path | None] = ContextVar(
    "preflighter_project_config_path", default=None
)


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/preflighter/config.yaml
    """
    return Path.home() / ".config" / "preflighter" / "config.yaml"


def load_config(config_path: Path | None = None) -> PreflighterConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to the project config file. Defaults to
            ./preflighter.yaml

    Returns:
        PreflighterConfig instance with merged configuration.

    Raises:
        ConfigError: If a config file is unreadable or a value is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME
    elif not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if not config_path.exists():
        logger.info("no_project_config", path=str(config_path))

    token = _project_config_path.set(config_path)
    try:
        return PreflighterConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
