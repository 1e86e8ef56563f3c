"""Configuration error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class ConfigLoadError(ConfigurationError):
    """Raised when a configuration file cannot be read, parsed or validated."""

    def __init__(self, message: str, *, config_file: Path | None = None) -> None:
        if config_file is not None:
            message = f"{message} (file: {config_file})"
        super().__init__(message)
        self.config_file = config_file


class InvalidConfigurationFilesError(ConfigurationError):
    """Raised when explicitly requested configuration files do not exist."""

    def __init__(self, paths: Iterable[Path]) -> None:
        self.paths = tuple(paths)
        joined = ", ".join(str(path) for path in self.paths)
        super().__init__(f"Configuration files not found: {joined}")


class _InstanceNamesError(ConfigurationError):
    summary = "Invalid instances"

    def __init__(self, instance_names: Iterable[str]) -> None:
        self.instance_names = tuple(instance_names)
        super().__init__(f"{self.summary}: {', '.join(self.instance_names)}")


class InvalidInstancesError(_InstanceNamesError):
    """Raised when requested instance names are not present in any configuration."""

    summary = "Instances not found in configuration"


class SplitInstancesError(_InstanceNamesError):
    """Raised when one base URL is configured under more than one instance name."""

    summary = "Instances share the same base URL"


class DuplicateInstancesError(_InstanceNamesError):
    """Raised when the same instance name is declared more than once."""

    summary = "Instances declared more than once"
