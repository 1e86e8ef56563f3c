"""Locate, load, validate and filter YAML instance configuration.

A configuration file maps each service type to its named instances::

    radarr:
      movies:
        base_url: http://localhost:7878
        api_key: secret
        custom_formats:
          - trash_ids: [...]
            quality_profiles:
              - name: HD-1080p

``base_url`` and ``api_key`` may be left out and supplied through
``ARRSYNC_<INSTANCE>_BASE_URL`` / ``ARRSYNC_<INSTANCE>_API_KEY`` instead.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

import yaml
from pydantic import ValidationError

from arrsync.domain.records import ServiceType

from .env import get_instance_secret, instance_secret_name
from .errors import (
    ConfigLoadError,
    DuplicateInstancesError,
    InvalidConfigurationFilesError,
    InvalidInstancesError,
    MissingConfigurationError,
    SplitInstancesError,
)
from .models import ServiceConfiguration

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = getLogger(__name__)

CONFIG_BASENAME = "arrsync"
CONFIG_INCLUDE_DIR = "configs"
YAML_SUFFIXES = (".yml", ".yaml")
ENV_SECRETS = ("base_url", "api_key")


@dataclass(frozen=True, slots=True)
class ConfigFilterCriteria:
    """Narrows which configuration files and instances take part in a run."""

    manual_config_files: tuple[Path, ...] = ()
    instances: tuple[str, ...] = ()
    service: ServiceType | None = None


@dataclass(slots=True)
class ConfigurationRegistry:
    config_dir: Path
    encoding: str = "utf-8"

    def find_and_load(
        self,
        criteria: ConfigFilterCriteria | None = None,
    ) -> list[ServiceConfiguration]:
        """Return the validated instances matching ``criteria``.

        All structural problems (missing files, duplicate or split instances,
        unknown requested instances) raise before any instance is returned.
        """

        criteria = criteria or ConfigFilterCriteria()
        paths = self.find_config_files(criteria.manual_config_files)
        if not paths:
            log.warning("No configuration files found in %s", self.config_dir)

        configs: list[ServiceConfiguration] = []
        for path in paths:
            configs.extend(self.load_file(path))

        _check_duplicate_instances(configs)
        _check_split_instances(configs)
        return _filter_configs(configs, criteria)

    def find_config_files(self, manual_config_files: Iterable[Path] = ()) -> list[Path]:
        manual = tuple(manual_config_files)
        if manual:
            missing = [path for path in manual if not path.is_file()]
            if missing:
                raise InvalidConfigurationFilesError(missing)
            return list(manual)

        paths = [
            candidate
            for suffix in YAML_SUFFIXES
            if (candidate := self.config_dir / f"{CONFIG_BASENAME}{suffix}").is_file()
        ]
        include_dir = self.config_dir / CONFIG_INCLUDE_DIR
        if include_dir.is_dir():
            paths.extend(
                sorted(
                    path
                    for path in include_dir.iterdir()
                    if path.is_file() and path.suffix in YAML_SUFFIXES
                )
            )
        log.debug("Found configuration files: %s", [str(path) for path in paths])
        return paths

    def load_file(self, path: Path) -> list[ServiceConfiguration]:
        data = self._read_yaml(path)
        configs: list[ServiceConfiguration] = []
        for service_key, instances in data.items():
            try:
                service_type = ServiceType(str(service_key).lower())
            except ValueError as exc:
                raise ConfigLoadError(
                    f"Unknown service type {service_key!r}", config_file=path
                ) from exc
            if instances is None:
                continue
            if not isinstance(instances, dict):
                raise ConfigLoadError(
                    f"Expected a mapping of instances under {service_key!r}", config_file=path
                )
            for instance_name, values in cast("dict[object, object]", instances).items():
                configs.append(
                    self._parse_instance(path, service_type, str(instance_name), values)
                )
        return configs

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        log.debug("Reading configuration file %s", path)
        try:
            with path.open(encoding=self.encoding) as handle:
                loaded = yaml.safe_load(handle)
        except OSError as exc:
            raise ConfigLoadError(f"Unable to read configuration: {exc}", config_file=path) from exc
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML: {exc}", config_file=path) from exc

        if loaded is None:
            log.info("Configuration file %s is empty", path)
            return {}
        if not isinstance(loaded, dict):
            raise ConfigLoadError(
                f"Invalid config format: expected mapping, got {type(loaded).__name__}",
                config_file=path,
            )
        return cast("dict[str, Any]", loaded)

    def _parse_instance(
        self,
        path: Path,
        service_type: ServiceType,
        instance_name: str,
        values: object,
    ) -> ServiceConfiguration:
        if values is None:
            values = {}
        if not isinstance(values, dict):
            raise ConfigLoadError(
                f"Instance {instance_name!r} must be a mapping", config_file=path
            )
        payload = dict(cast("dict[str, object]", values))
        for prop in ENV_SECRETS:
            if payload.get(prop) is None:
                secret = get_instance_secret(instance_name, prop)
                if secret is not None:
                    payload[prop] = secret
        missing = [prop for prop in ENV_SECRETS if payload.get(prop) is None]
        if missing:
            hints = ", ".join(
                f"{prop} (or {instance_secret_name(instance_name, prop)})" for prop in missing
            )
            raise MissingConfigurationError(
                f"Instance {instance_name!r} in {path} is missing: {hints}"
            )
        payload["service_type"] = service_type
        payload["instance_name"] = instance_name
        try:
            return ServiceConfiguration.model_validate(payload)
        except ValidationError as exc:
            raise ConfigLoadError(
                f"Invalid configuration for instance {instance_name!r}: {exc}",
                config_file=path,
            ) from exc


def _check_duplicate_instances(configs: Iterable[ServiceConfiguration]) -> None:
    counts: dict[str, int] = defaultdict(int)
    for config in configs:
        counts[config.instance_name.casefold()] += 1
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateInstancesError(duplicates)


def _check_split_instances(configs: Iterable[ServiceConfiguration]) -> None:
    names_by_url: dict[str, list[str]] = defaultdict(list)
    for config in configs:
        names_by_url[config.base_url.casefold()].append(config.instance_name)
    split = sorted(
        name for names in names_by_url.values() if len(names) > 1 for name in names
    )
    if split:
        raise SplitInstancesError(split)


def _filter_configs(
    configs: list[ServiceConfiguration],
    criteria: ConfigFilterCriteria,
) -> list[ServiceConfiguration]:
    selected = configs
    if criteria.service is not None:
        selected = [config for config in selected if config.service_type is criteria.service]

    if criteria.instances:
        known = {config.instance_name.casefold() for config in selected}
        unknown = [name for name in criteria.instances if name.casefold() not in known]
        if unknown:
            raise InvalidInstancesError(unknown)
        wanted = {name.casefold() for name in criteria.instances}
        selected = [config for config in selected if config.instance_name.casefold() in wanted]

    return selected
