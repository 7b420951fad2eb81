"""
Configuration loader for accountstate.

Loads configuration from YAML files and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """Account state store configuration."""

    default_leverage: float = Field(
        default=1.0,
        gt=0,
        description="Leverage assumed for symbols without a known leverage",
    )
    quote_asset: str = Field(default="USDT", description="Quote asset balances are held in")


class StorageConfig(BaseModel):
    """Metadata storage backend configuration."""

    backend: Literal["memory", "sql"] = Field(default="memory", description="Storage backend")
    url: str = Field(default="sqlite:///account_state.db", description="SQLAlchemy database URL")
    table_name: str = Field(default="account_state_kv", description="Key/value table name")


class PersistenceConfig(BaseModel):
    """Metadata persister configuration."""

    interval_ms: int = Field(default=250, gt=0, description="Persist check interval in milliseconds")
    metadata_key: str = Field(default="positionMetadata", description="Storage key prefix for metadata")


class ReportingConfig(BaseModel):
    """Balance report configuration."""

    url: Optional[str] = Field(default=None, description="Balance report endpoint")
    timeout: int = Field(default=10, description="Request timeout in seconds")
    retry_count: int = Field(default=3, description="Number of retries")
    retry_delay: int = Field(default=1, description="Backoff factor between retries in seconds")
    view_tags: List[str] = Field(default_factory=list, description="Dashboard visibility tags")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level name")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")
    format: Optional[str] = Field(default=None, description="Optional log format string")


class Config(BaseModel):
    """Main configuration model."""

    account_id: str = Field(default="default", description="Account identifier used as storage key")
    store: StoreConfig = Field(default_factory=StoreConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to configuration file. If None, searches for config.yaml
                     in the working directory and config directory, and falls back
                     to defaults when none is found.

    Returns:
        Config object with loaded configuration.

    Raises:
        FileNotFoundError: If an explicit configuration file is not found.
        ValueError: If configuration is invalid.
    """
    config_data: Dict[str, Any] = {}

    if config_path is None:
        for path in (Path("config") / "config.yaml", Path("config.yaml")):
            if path.exists():
                config_path = str(path)
                break
    elif not Path(config_path).exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
        if not isinstance(config_data, dict):
            raise ValueError(
                f"Invalid configuration: expected a mapping at the top level of {config_path}"
            )

    # Override with environment variables
    config_data = _override_with_env(config_data)

    try:
        return Config(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def _override_with_env(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Override configuration with environment variables.

    Environment variables format:
    - ACCOUNTSTATE_ACCOUNT_ID
    - ACCOUNTSTATE_DEFAULT_LEVERAGE
    - ACCOUNTSTATE_QUOTE_ASSET
    - ACCOUNTSTATE_STORAGE_BACKEND
    - ACCOUNTSTATE_STORAGE_URL
    - ACCOUNTSTATE_PERSIST_INTERVAL_MS
    - ACCOUNTSTATE_REPORT_URL
    - ACCOUNTSTATE_LOG_LEVEL

    Args:
        config_data: Configuration dictionary.

    Returns:
        Updated configuration dictionary.
    """
    account_id = os.getenv("ACCOUNTSTATE_ACCOUNT_ID")
    if account_id is not None:
        config_data["account_id"] = account_id

    env_mappings = {
        "ACCOUNTSTATE_DEFAULT_LEVERAGE": ("store", "default_leverage"),
        "ACCOUNTSTATE_QUOTE_ASSET": ("store", "quote_asset"),
        "ACCOUNTSTATE_STORAGE_BACKEND": ("storage", "backend"),
        "ACCOUNTSTATE_STORAGE_URL": ("storage", "url"),
        "ACCOUNTSTATE_PERSIST_INTERVAL_MS": ("persistence", "interval_ms"),
        "ACCOUNTSTATE_REPORT_URL": ("reporting", "url"),
        "ACCOUNTSTATE_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            if section not in config_data or config_data[section] is None:
                config_data[section] = {}
            config_data[section][key] = value

    return config_data
