"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from logging import getLogger
from typing import TYPE_CHECKING

from arrsync.adapters.guide import FilesystemGuide
from arrsync.adapters.servarr import ServarrClient, build_servarr_client
from arrsync.adapters.sqlalchemy import SqlAlchemyIdentityCacheStore, is_started, startup
from arrsync.config import ConfigFilterCriteria, ConfigurationRegistry, get_storage_config
from arrsync.domain.identity_cache import ScopedIdentityCache
from arrsync.domain.reconciliation import (
    ApplyResult,
    DeletedTransaction,
    TransactionSet,
    apply_transactions,
)
from arrsync.domain.records import RecordKind
from arrsync.domain.sync import InstanceSyncResult, log_transactions, sync_instance

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arrsync.config.models import ServiceConfiguration
    from arrsync.domain.guide import GuideCustomFormat
    from arrsync.domain.ports.guide import GuideProvider
    from arrsync.domain.ports.persistence import IdentityCacheStore
    from arrsync.domain.records import RemoteRecord, ServiceType

ClientFactory = Callable[["ServiceConfiguration"], ServarrClient]


log = getLogger(__name__)


class ExitStatus(IntEnum):
    SUCCEEDED = 0
    FAILED = 1


@dataclass(slots=True)
class InstanceOutcome:
    instance_name: str
    result: InstanceSyncResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class SyncReport:
    outcomes: list[InstanceOutcome] = field(default_factory=list[InstanceOutcome])

    @property
    def failed(self) -> list[InstanceOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def exit_status(self) -> ExitStatus:
        return ExitStatus.FAILED if self.failed else ExitStatus.SUCCEEDED


def load_service_configs(
    criteria: ConfigFilterCriteria | None = None,
    *,
    registry: ConfigurationRegistry | None = None,
) -> list[ServiceConfiguration]:
    effective_registry = registry or ConfigurationRegistry(get_storage_config().config_dir)
    return effective_registry.find_and_load(criteria)


def sync_services(
    *,
    criteria: ConfigFilterCriteria | None = None,
    preview: bool = False,
    guide: GuideProvider | None = None,
    cache_store: IdentityCacheStore | None = None,
    client_factory: ClientFactory = build_servarr_client,
    registry: ConfigurationRegistry | None = None,
) -> SyncReport:
    """Synchronise every configured instance using the configured adapters.

    Configuration problems raise before any instance is touched.
    """

    configs = load_service_configs(criteria, registry=registry)
    effective_guide = guide or _default_guide()
    effective_store = cache_store or _default_cache_store()
    log.info("Starting sync of %s instance(s), preview=%s", len(configs), preview)

    report = asyncio.run(
        sync_instances(
            configs,
            guide=effective_guide,
            cache_store=effective_store,
            client_factory=client_factory,
            preview=preview,
        )
    )

    log.info(
        "Finished sync: succeeded=%s, failed=%s",
        len(report.outcomes) - len(report.failed),
        len(report.failed),
    )
    return report


async def sync_instances(
    configs: Sequence[ServiceConfiguration],
    *,
    guide: GuideProvider,
    cache_store: IdentityCacheStore,
    client_factory: ClientFactory = build_servarr_client,
    preview: bool = False,
) -> SyncReport:
    """Process instances one after another; one failing instance does not stop the rest."""

    report = SyncReport()
    for config in configs:
        log.info("Processing %s instance %s", config.service_type, config.instance_name)
        try:
            async with client_factory(config) as client:
                result = await sync_instance(
                    config,
                    client=client,
                    guide=guide,
                    cache_store=cache_store,
                    preview=preview,
                )
        except Exception as exc:
            log.exception("Sync failed for instance %s", config.instance_name)
            report.outcomes.append(InstanceOutcome(config.instance_name, error=str(exc)))
            continue
        report.outcomes.append(InstanceOutcome(config.instance_name, result=result))
    return report


def list_custom_formats(
    service: ServiceType,
    *,
    guide: GuideProvider | None = None,
) -> list[GuideCustomFormat]:
    """Guide custom formats available for ``service``, sorted by name."""

    effective_guide = guide or _default_guide()
    return sorted(effective_guide.custom_formats(service), key=lambda item: item.name.casefold())


def delete_custom_formats(
    instance_name: str,
    names: Sequence[str] = (),
    *,
    delete_all: bool = False,
    preview: bool = False,
    cache_store: IdentityCacheStore | None = None,
    client_factory: ClientFactory = build_servarr_client,
    registry: ConfigurationRegistry | None = None,
) -> ApplyResult:
    """Delete custom formats from one instance by name, or all of them."""

    if not names and not delete_all:
        raise ValueError("Pass custom format names or request deletion of all of them")

    configs = load_service_configs(
        ConfigFilterCriteria(instances=(instance_name,)),
        registry=registry,
    )
    config = configs[0]
    effective_store = cache_store or _default_cache_store()
    return asyncio.run(
        _delete_custom_formats(
            config,
            names,
            delete_all=delete_all,
            preview=preview,
            cache_store=effective_store,
            client_factory=client_factory,
        )
    )


async def _delete_custom_formats(
    config: ServiceConfiguration,
    names: Sequence[str],
    *,
    delete_all: bool,
    preview: bool,
    cache_store: IdentityCacheStore,
    client_factory: ClientFactory,
) -> ApplyResult:
    cache = ScopedIdentityCache(cache_store, config.instance_name, RecordKind.CUSTOM_FORMAT)
    key_by_id = {remote_id: key for key, remote_id in cache.entries().items()}

    async with client_factory(config) as client:
        remote_records = await client.get_records(RecordKind.CUSTOM_FORMAT)
        selected: list[RemoteRecord]
        if delete_all:
            selected = list(remote_records)
        else:
            by_name = {record.name.casefold(): record for record in remote_records}
            selected = []
            for name in names:
                record = by_name.get(name.casefold())
                if record is None:
                    log.warning("Custom format %s does not exist on %s", name, config.instance_name)
                    continue
                selected.append(record)

        transactions = TransactionSet(
            deleted=[
                DeletedTransaction(
                    remote_id=record.id,
                    key=key_by_id.get(record.id, record.name),
                    name=record.name,
                )
                for record in selected
            ]
        )
        if preview:
            log_transactions(RecordKind.CUSTOM_FORMAT, transactions)
            return ApplyResult.preview(transactions)
        return await apply_transactions(client, RecordKind.CUSTOM_FORMAT, transactions, cache)


def _default_guide() -> FilesystemGuide:
    return FilesystemGuide(get_storage_config().guide_dir)


def _default_cache_store() -> SqlAlchemyIdentityCacheStore:
    if not is_started():
        startup()
    return SqlAlchemyIdentityCacheStore()
