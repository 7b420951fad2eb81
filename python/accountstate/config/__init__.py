"""Configuration module for accountstate."""

from .loader import (
    Config,
    LoggingConfig,
    PersistenceConfig,
    ReportingConfig,
    StorageConfig,
    StoreConfig,
    load_config,
)

__all__ = [
    "Config",
    "LoggingConfig",
    "PersistenceConfig",
    "ReportingConfig",
    "StorageConfig",
    "StoreConfig",
    "load_config",
]
