"""
Watchrun Configuration Module.

Merges defaults, the TOML config file, .env, environment variables
and command-line overrides into one Settings value using Pydantic Settings.
Requires Python 3.11+.
"""

from pathlib import Path
from typing import Annotated, Any

from dotenv import find_dotenv, load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = Path(".watchrun.toml")

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="WATCHRUN_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        """Accept only the standard logging level names."""
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return v

    @field_validator("format")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Only the console and json renderers exist."""
        v = v.lower()
        if v not in ("console", "json"):
            raise ValueError(f"unknown log format: {v}")
        return v


class Settings(BaseSettings):
    """Startup configuration for the watch loop."""

    model_config = SettingsConfigDict(
        env_prefix="WATCHRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        toml_file=DEFAULT_CONFIG_FILE,
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="watchrun")
    app_version: str = Field(default="0.1.0")

    command: str | None = Field(default=None, description="Shell command line to run")
    directories: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        description="Directories to watch for modifications",
    )
    shell: str = Field(default="sh", min_length=1, description="Command interpreter")
    clear_screen: bool = Field(default=True)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("command", mode="before")
    @classmethod
    def blank_command_is_unset(cls, v: Any) -> Any:
        """Treat an empty or whitespace command as not supplied."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("directories", mode="before")
    @classmethod
    def parse_directories(cls, v: Any) -> Any:
        """Parse directories from a whitespace-separated string or list."""
        if isinstance(v, str):
            v = v.split()
        if isinstance(v, (list, tuple)):
            v = [str(d) for d in v if str(d).strip()]
            return v or None
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """CLI overrides, then environment, then .env, then the TOML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
        )


def load_settings(config_file: Path | str | None = None, **overrides: Any) -> Settings:
    """
    Build the merged settings.

    Args:
        config_file: TOML file to read instead of .watchrun.toml
        **overrides: Command-line values; None means "not given"

    Returns:
        Settings with every source applied
    """
    # Load the working directory's .env into os.environ so nested
    # BaseSettings classes see the values
    load_dotenv(find_dotenv(usecwd=True))

    init_kwargs = {k: v for k, v in overrides.items() if v is not None}

    if config_file is None:
        return Settings(**init_kwargs)

    class FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=Path(config_file))

    return FileSettings(**init_kwargs)
