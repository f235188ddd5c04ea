"""
Configuration loader for the XAI MCP server.

Loads settings from config.yaml, then applies environment overrides.
The API key is only ever read from the environment and is never logged.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "grok-4-1-fast"
DEFAULT_BASE_URL = "https://api.x.ai/v1"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


class XAIConfig(BaseModel):
    """Static credentials and endpoint settings for the XAI client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", description="XAI API key (secret)", repr=False)
    model: str = Field(default=DEFAULT_MODEL, description="XAI model identifier")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="XAI API base URL")
    timeout: Optional[float] = Field(
        default=None, description="HTTP timeout in seconds (None disables it)"
    )


class HTTPConfig(BaseModel):
    """Configuration for the HTTP transport."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")


class Config(BaseModel):
    """Main configuration object."""

    model_config = ConfigDict(frozen=True)

    xai: XAIConfig = Field(default_factory=XAIConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    log_level: str = Field(default="INFO", description="Logging level")
    enable_pretty_print: bool = Field(
        default=False, description="Enable custom pretty print for debugging"
    )
    save_to_file: bool = Field(default=False, description="Save logs to file")
    log_file_path: str = Field(default="server.log", description="Log file path (relative to root)")
    max_log_file_size: int = Field(
        default=10485760, description="Max log file size in bytes (10MB)"
    )
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


# Environment variable -> (section, key)
_ENV_OVERRIDES = {
    "XAI_API_KEY": ("xai", "api_key"),
    "XAI_MODEL": ("xai", "model"),
    "XAI_BASE_URL": ("xai", "base_url"),
    "HOST": ("http", "host"),
    "PORT": ("http", "port"),
    "LOG_LEVEL": (None, "log_level"),
}


def load_config(
    config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> Config:
    """
    Load configuration from YAML file and environment.

    Args:
        config_path: Path to config.yaml file. Defaults to ./config.yaml
        environ: Environment mapping. Defaults to os.environ

    Returns:
        Loaded configuration object
    """
    if config_path is None:
        config_path = Path("config.yaml")
    if environ is None:
        environ = os.environ

    config_data: Dict[str, Any] = {}

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

    # Flatten nested logging section
    logging_config = config_data.pop("logging", None) or {}
    if "level" in logging_config:
        config_data["log_level"] = logging_config["level"]
    for key in (
        "enable_pretty_print",
        "save_to_file",
        "log_file_path",
        "max_log_file_size",
        "backup_count",
    ):
        if key in logging_config:
            config_data[key] = logging_config[key]

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if not value:
            continue
        if section is None:
            config_data[key] = value
        else:
            config_data[section] = {**(config_data.get(section) or {}), key: value}

    try:
        return Config(**config_data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def validate_config(config: Config) -> None:
    """
    Validate required configuration.

    Raises:
        ConfigurationError: If the XAI API key is missing
    """
    if not config.xai.api_key:
        raise ConfigurationError(
            "XAI_API_KEY environment variable is required. "
            "Get your API key from https://console.x.ai"
        )
