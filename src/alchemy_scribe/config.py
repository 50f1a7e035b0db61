# ABOUTME: Settings for a dataset build, read from ALCHEMY_SCRIBE_* variables and an optional .env file
# ABOUTME: Provides type-safe access to source URL, cache paths, network limits and logging config

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOURCE_URL = "https://little-alchemy.fandom.com/wiki/Elements_(Little_Alchemy_2)"


class Config(BaseSettings):
    """Settings for one dataset build."""

    model_config = SettingsConfigDict(
        env_prefix="ALCHEMY_SCRIBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source document
    source_url: str = Field(default=DEFAULT_SOURCE_URL, description="Wiki page listing every element and recipe")
    user_agent: str = Field(
        default="AlchemyScribe/1.0 (dataset builder)", description="User-Agent header sent with every request"
    )
    heading_level: str = Field(default="h3", description="Heading tag that opens a tier section")
    table_class: str = Field(default="list-table", description="CSS class of the element tables")

    # Output locations
    output_path: Path = Field(default=Path("data/elements.json"), description="Where the dataset artifact is written")
    icons_dir: Path = Field(default=Path("data/icons"), description="Directory holding one icon file per element")
    icon_extension: str = Field(default="svg", description="File extension used for persisted icons")

    # Network behaviour
    request_timeout: float = Field(default=30.0, description="Timeout in seconds for each HTTP request")
    request_delay: float = Field(default=0.1, ge=0.0, description="Pause in seconds between icon requests")
    max_redirects: int = Field(default=5, ge=0, description="Maximum redirect hops followed per icon")
    max_icon_bytes: int = Field(default=5 * 1024 * 1024, gt=0, description="Largest icon accepted, in bytes")
    fetch_attempts: int = Field(default=3, ge=1, description="Attempts made to fetch the source document")

    # Logging
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Where logs are written")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Minimum log level")
    log_file: Path | None = Field(default=None, description="Replaces logs/alchemy-scribe.log when set")


_config_instance: Config | None = None


def get_config() -> Config:
    """Shared config, created from the environment on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Rebuild the shared config after the environment changed."""
    global _config_instance
    _config_instance = Config()
    return _config_instance
