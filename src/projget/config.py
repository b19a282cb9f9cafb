from __future__ import annotations

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

from projget.exceptions import ConfigError
from projget.logging import get_logger

__all__ = [
    "BuildConfig",
    "ProjgetConfig",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_REMOTE_NAME",
    "DEFAULT_REPOSITORY_DIR",
    "PROJECT_CONFIG_FILE",
    "load_config",
    "get_user_config_path",
    "get_default_projects_path",
]

logger = get_logger(__name__)

#: Environment checked out when nothing else decides.
DEFAULT_ENVIRONMENT = "master"

#: Name under which the remote endpoint is registered in local repositories.
DEFAULT_REMOTE_NAME = "platform"

#: Subdirectory of a project root holding the repository.
DEFAULT_REPOSITORY_DIR = "repository"

#: Project-level configuration file name, looked up in the working directory.
PROJECT_CONFIG_FILE = "projget.yaml"


class BuildConfig(BaseModel):
    """Settings for the initial build of a provisioned project.

    Attributes:
        command: Command run inside the repository directory. An empty list
            disables the build.
        timeout_seconds: Maximum build duration (default: 600s).
    """

    command: list[str] = Field(default_factory=list)
    timeout_seconds: int = Field(default=600, ge=1, le=7200)


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, raising ConfigError on malformed content."""
    try:
        with open(path) as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in {path}: {e}") from e
    if loaded is None:
        logger.warning("config_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            message=f"Config file {path} must contain a mapping",
            value=type(loaded).__name__,
        )
    return loaded


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            self._config_data = _read_yaml(yaml_file)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class ProjgetConfig(BaseSettings):
    """Root configuration object containing all projget settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROJGET_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    default_environment: str = DEFAULT_ENVIRONMENT
    remote_name: str = DEFAULT_REMOTE_NAME
    repository_dir: str = DEFAULT_REPOSITORY_DIR
    api_host: str | None = None
    projects_file: Path = Field(default_factory=lambda: get_default_projects_path())
    build: BuildConfig = Field(default_factory=BuildConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @field_validator("default_environment", "remote_name", "repository_dir")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("repository_dir")
    @classmethod
    def check_single_component(cls, v: str) -> str:
        """The repository directory is a direct child of the project root."""
        if Path(v).name != v or v in (".", ".."):
            raise ValueError("must be a single directory name")
        return v

    @field_validator("projects_file")
    @classmethod
    def expand_projects_file(cls, v: Path) -> Path:
        return v.expanduser()

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
        1. Init settings (an explicit --config file)
        2. Environment variables (PROJGET_*)
        3. Project YAML config (./projget.yaml)
        4. User YAML config (~/.config/projget/config.yaml)
        """
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, Path.cwd() / PROJECT_CONFIG_FILE),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/projget/config.yaml
    """
    return Path.home() / ".config" / "projget" / "config.yaml"


def get_default_projects_path() -> Path:
    """Get the default location of the project catalog.

    Returns:
        Path to ~/.config/projget/projects.yaml
    """
    return Path.home() / ".config" / "projget" / "projects.yaml"


def load_config(config_path: Path | None = None) -> ProjgetConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env -> file.

    Args:
        config_path: Optional explicit config file. Its values override every
            other source.

    Returns:
        ProjgetConfig instance with merged configuration.

    Raises:
        ConfigError: If configuration is invalid or the explicit file is missing.
    """
    overrides: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(
                message=f"Config file not found: {config_path}",
                field="config",
                value=str(config_path),
            )
        overrides = _read_yaml(config_path)
    elif not (Path.cwd() / PROJECT_CONFIG_FILE).exists():
        logger.debug("project_config_missing", using="defaults")

    try:
        return ProjgetConfig(**overrides)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
