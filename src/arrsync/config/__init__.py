"""Configuration loading for arrsync."""

from __future__ import annotations

from .errors import (
    ConfigLoadError,
    ConfigurationError,
    DuplicateInstancesError,
    InvalidConfigurationFilesError,
    InvalidInstancesError,
    MissingConfigurationError,
    SplitInstancesError,
)
from .instances import ConfigFilterCriteria, ConfigurationRegistry
from .models import (
    CustomFormatConfig,
    QualityProfileConfig,
    QualityProfileScoreConfig,
    ReleaseProfileConfig,
    ServiceConfiguration,
)
from .storage import StorageConfig, get_database_uri, get_storage_config

__all__ = [
    "ConfigFilterCriteria",
    "ConfigLoadError",
    "ConfigurationError",
    "ConfigurationRegistry",
    "CustomFormatConfig",
    "DuplicateInstancesError",
    "InvalidConfigurationFilesError",
    "InvalidInstancesError",
    "MissingConfigurationError",
    "QualityProfileConfig",
    "QualityProfileScoreConfig",
    "ReleaseProfileConfig",
    "ServiceConfiguration",
    "SplitInstancesError",
    "StorageConfig",
    "get_database_uri",
    "get_storage_config",
]
