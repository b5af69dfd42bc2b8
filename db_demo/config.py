"""
Configuration management for the DB Demo service.
Uses pydantic-settings for environment variable loading, plus a
configuration store for named connection strings.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger(__name__)

KEY_DELIMITER = ":"
CONNECTION_STRINGS_SECTION = "ConnectionStrings"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "DB Demo Service"
    app_version: str = "1.0.0"
    environment: str = "development"  # development, staging, production
    debug: bool = False
    log_level: str = "INFO"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 8081

    # JSON settings file holding ConnectionStrings:DefaultConnection
    appsettings_file: str = "appsettings.json"

    @property
    def service_name(self) -> str:
        """Alias for app_name for health check compatibility."""
        return self.app_name

    @property
    def version(self) -> str:
        """Alias for app_version for health check compatibility."""
        return self.app_version


class ConfigurationStore(BaseSettings):
    """
    Named connection strings from a JSON settings file and the environment.

    The file is read from ``model_config["json_file"]``
    (``{"ConnectionStrings": {"DefaultConnection": "..."}}``).
    Environment variables such as ``ConnectionStrings__DefaultConnection``
    override file values. Names are case-insensitive.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    connection_strings: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias=CONNECTION_STRINGS_SECTION
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, JsonConfigSettingsSource(settings_cls)

    @field_validator("connection_strings", mode="before")
    @classmethod
    def _normalize_names(cls, value: Any) -> Any:
        # File keys come first and environment keys after, so the environment wins
        if isinstance(value, dict):
            return {str(name).lower(): v for name, v in value.items()}
        return value

    def get_connection_string(self, name: str) -> Optional[str]:
        """Look up ``ConnectionStrings:{name}``; empty values count as missing."""
        return self.connection_strings.get(name.lower()) or None

    def as_mapping(self) -> Dict[str, str]:
        """Flat view keyed ``connectionstrings:{name}``, as read by the resolver."""
        section = CONNECTION_STRINGS_SECTION.lower()
        return {
            f"{section}{KEY_DELIMITER}{name}": value
            for name, value in self.connection_strings.items()
        }


def load_configuration_store(path: Optional[Union[str, Path]] = None) -> ConfigurationStore:
    """
    Build the configuration store from a JSON settings file and the environment.

    A missing file yields a store backed by the environment only. An
    unreadable or invalid file is logged and ignored.
    """
    class FileConfigurationStore(ConfigurationStore):
        model_config = SettingsConfigDict(json_file=path)

    try:
        return FileConfigurationStore()
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        return ConfigurationStore()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export settings instance
settings = get_settings()
