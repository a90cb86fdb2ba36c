"""
Alert Relay - Application Configuration

Settings are read from a YAML file, may be overridden by ``ALERTRELAY_*``
environment variables, and finally by command line flags.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from alertrelay.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_LISTEN_ADDRESS = ":9087"
DEFAULT_SPLIT_SIZE = 4000


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ALERTRELAY_",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Telegram
    # -------------------------------------------------------------------------
    telegram_token: SecretStr = Field(...)
    telegram_api_url: str = Field(default="https://api.telegram.org")
    telegram_timeout: float = Field(default=30.0, gt=0)
    listen_updates: bool = Field(default=True)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------
    template_path: str = Field(default="")
    time_zone: str = Field(default="")
    time_outdata: str = Field(default="%d/%m/%Y %H:%M:%S")
    split_token: str = Field(default="|")

    # Counted in characters, the key name is kept for existing config files.
    split_msg_byte: int = Field(default=DEFAULT_SPLIT_SIZE)

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    listen_address: str = Field(default=DEFAULT_LISTEN_ADDRESS)
    debug: bool = Field(default=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Values read from the YAML file arrive as init kwargs, so the
        # environment has to be consulted first to win over them.
        return env_settings, init_settings

    @field_validator("split_msg_byte", mode="before")
    @classmethod
    def unset_split_size(cls, v: Any) -> Any:
        if v is None or v == "":
            return DEFAULT_SPLIT_SIZE
        return v

    @field_validator("split_msg_byte")
    @classmethod
    def validate_split_size(cls, v: int) -> int:
        """Treat a zero split size as the default."""
        if v == 0:
            return DEFAULT_SPLIT_SIZE
        if v < 0:
            raise ValueError("split_msg_byte must be positive")
        return v

    @field_validator("split_token")
    @classmethod
    def validate_split_token(cls, v: str) -> str:
        if not v:
            raise ValueError("split_token must not be empty")
        return v

    @property
    def zone(self) -> ZoneInfo:
        """Configured time zone."""
        return ZoneInfo(self.time_zone)

    @property
    def reload_templates(self) -> bool:
        """Templates are reloaded on every request in debug mode."""
        return self.debug


def read_config_file(path: str) -> Dict[str, Any]:
    """
    Read the YAML configuration file.

    Args:
        path: Path of the YAML file

    Returns:
        Mapping of configuration keys to values

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Problem reading configuration file: {e}",
            details={"path": path},
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Error parsing configuration file: {e}",
            details={"path": path},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Error parsing configuration file: top level must be a mapping",
            details={"path": path},
        )
    return data


def load_settings(
    config_path: str = DEFAULT_CONFIG_PATH,
    template_path: Optional[str] = None,
    listen_address: Optional[str] = None,
    debug: Optional[bool] = None,
) -> Settings:
    """
    Build the application settings.

    Command line values, when given, take precedence over the environment
    and the configuration file.

    Raises:
        ConfigurationError: If the configuration cannot be loaded or a
            required value is missing
    """
    data = read_config_file(config_path)

    try:
        settings = Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            details={"path": config_path},
        ) from e

    overrides: Dict[str, Any] = {}
    if template_path:
        overrides["template_path"] = template_path
    if listen_address:
        overrides["listen_address"] = listen_address
    if debug is not None:
        overrides["debug"] = debug
    if overrides:
        settings = settings.model_copy(update=overrides)

    validate_settings(settings)
    return settings


def validate_settings(settings: Settings) -> None:
    """Check the values the service cannot start without."""
    if not settings.telegram_token.get_secret_value():
        raise ConfigurationError("You must define telegram_token")

    if not settings.template_path:
        raise ConfigurationError("You must define template path")

    if not settings.time_zone:
        raise ConfigurationError("You must define time_zone of your bot")

    try:
        settings.zone
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown time_zone: {settings.time_zone}",
            details={"time_zone": settings.time_zone},
        ) from e


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    An empty host (``":9087"``) listens on all interfaces.
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ConfigurationError(f"Invalid listen address: {address}")

    try:
        port_number = int(port)
    except ValueError as e:
        raise ConfigurationError(f"Invalid listen address: {address}") from e

    return host or "0.0.0.0", port_number
