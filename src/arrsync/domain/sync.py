"""Per-instance synchronisation pass.

Batches run strictly in this order, each one finishing before the next starts:
custom formats, quality profile scores, release profiles.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .guide import build_guide_index, lookup_guide_format
from .identity_cache import ScopedIdentityCache
from .quality_profiles import apply_quality_profile_updates, plan_quality_profile_updates
from .reconciliation import (
    ApplyResult,
    apply_transactions,
    classify_records,
    record_deletions,
)
from .records import RecordKind, ServiceType
from .release_profiles import build_release_profile_records
from .scoring import aggregate_scores, migrate_legacy_overrides, profile_associations

if TYPE_CHECKING:
    from collections.abc import Sequence

    from arrsync.config.models import ServiceConfiguration

    from .guide import GuideCustomFormat
    from .ports.guide import GuideProvider
    from .ports.persistence import IdentityCacheStore
    from .ports.remote import RemoteRecordClient
    from .reconciliation import TransactionSet
    from .records import DesiredRecord

log = getLogger(__name__)


@dataclass(slots=True)
class InstanceSyncResult:
    """Outcome of one instance pass."""

    instance_name: str
    preview: bool
    custom_formats: ApplyResult
    quality_profiles_updated: int = 0
    release_profiles: ApplyResult | None = None


async def sync_instance(
    config: ServiceConfiguration,
    *,
    client: RemoteRecordClient,
    guide: GuideProvider,
    cache_store: IdentityCacheStore,
    preview: bool = False,
) -> InstanceSyncResult:
    """Converge one instance; any ``RemoteCallError`` aborts the remaining batches."""

    guide_formats = guide.custom_formats(config.service_type)
    custom_formats = await sync_custom_formats(
        config,
        guide_formats,
        client=client,
        cache_store=cache_store,
        preview=preview,
    )
    updated_profiles = await sync_quality_profile_scores(
        config,
        guide_formats,
        custom_formats.remote_ids,
        client=client,
        preview=preview,
    )

    release_profiles: ApplyResult | None = None
    if _manages_release_profiles(config, cache_store):
        release_profiles = await sync_release_profiles(
            config,
            guide,
            client=client,
            cache_store=cache_store,
            preview=preview,
        )

    return InstanceSyncResult(
        instance_name=config.instance_name,
        preview=preview,
        custom_formats=custom_formats,
        quality_profiles_updated=updated_profiles,
        release_profiles=release_profiles,
    )


async def sync_custom_formats(
    config: ServiceConfiguration,
    guide_formats: Sequence[GuideCustomFormat],
    *,
    client: RemoteRecordClient,
    cache_store: IdentityCacheStore,
    preview: bool = False,
) -> ApplyResult:
    index = build_guide_index(guide_formats)
    records: list[DesiredRecord] = []
    for trash_id in config.custom_format_trash_ids():
        guide_format = lookup_guide_format(index, trash_id)
        if guide_format is None:
            log.warning("A custom format with Trash ID %s does not exist in the guide", trash_id)
            continue
        records.append(guide_format.to_desired_record())

    cache = ScopedIdentityCache(cache_store, config.instance_name, RecordKind.CUSTOM_FORMAT)
    remote_records = await client.get_records(RecordKind.CUSTOM_FORMAT)
    transactions = classify_records(records, remote_records, cache)
    if config.delete_old_custom_formats:
        record_deletions(transactions, cache.entries(), remote_records)

    return await _apply_or_preview(
        client,
        RecordKind.CUSTOM_FORMAT,
        transactions,
        cache,
        preview=preview,
    )


async def sync_quality_profile_scores(
    config: ServiceConfiguration,
    guide_formats: Sequence[GuideCustomFormat],
    remote_ids: dict[str, int],
    *,
    client: RemoteRecordClient,
    preview: bool = False,
) -> int:
    """Aggregate configured scores and push changed quality profiles."""

    migrated = migrate_legacy_overrides(config)
    aggregates = aggregate_scores(
        profile_associations(migrated),
        build_guide_index(guide_formats, remote_ids),
        quality_profiles=migrated.quality_profiles,
    )
    if not aggregates:
        log.debug("No quality profile scores to send for %s", config.instance_name)
        return 0

    remote_profiles = await client.get_records(RecordKind.QUALITY_PROFILE)
    updates = plan_quality_profile_updates(aggregates.values(), remote_profiles)
    if preview:
        for update in updates:
            log.info(
                "[preview] Would update %s scores in quality profile %s",
                update.changed_scores,
                update.name,
            )
        return len(updates)
    return await apply_quality_profile_updates(client, updates)


async def sync_release_profiles(
    config: ServiceConfiguration,
    guide: GuideProvider,
    *,
    client: RemoteRecordClient,
    cache_store: IdentityCacheStore,
    preview: bool = False,
) -> ApplyResult:
    """Release profiles are fully managed: ones dropped from the config are deleted."""

    tags = await client.get_records(RecordKind.TAG) if _uses_tags(config) else []
    records = build_release_profile_records(config.release_profiles, guide.release_profiles(), tags)

    cache = ScopedIdentityCache(cache_store, config.instance_name, RecordKind.RELEASE_PROFILE)
    remote_records = await client.get_records(RecordKind.RELEASE_PROFILE)
    transactions = classify_records(records, remote_records, cache)
    record_deletions(transactions, cache.entries(), remote_records)

    return await _apply_or_preview(
        client,
        RecordKind.RELEASE_PROFILE,
        transactions,
        cache,
        preview=preview,
    )


def _manages_release_profiles(
    config: ServiceConfiguration,
    cache_store: IdentityCacheStore,
) -> bool:
    if config.service_type is not ServiceType.SONARR:
        return False
    if config.release_profiles:
        return True
    # profiles created by earlier runs still need removing
    return bool(cache_store.entries(config.instance_name, RecordKind.RELEASE_PROFILE))


def _uses_tags(config: ServiceConfiguration) -> bool:
    return any(release_profile.tags for release_profile in config.release_profiles)


async def _apply_or_preview(
    client: RemoteRecordClient,
    kind: RecordKind,
    transactions: TransactionSet,
    cache: ScopedIdentityCache,
    *,
    preview: bool,
) -> ApplyResult:
    if preview:
        log_transactions(kind, transactions)
        return ApplyResult.preview(transactions)

    result = await apply_transactions(client, kind, transactions, cache)
    log.info(
        "%s: created=%s, updated=%s, unchanged=%s, deleted=%s, failed=%s",
        kind,
        result.created,
        result.updated,
        result.unchanged,
        result.deleted,
        result.failed,
    )
    return result


def log_transactions(kind: RecordKind, transactions: TransactionSet) -> None:
    """Describe the transactions that a real run would apply."""

    for transaction in transactions.new:
        log.info("[preview] New %s: %s", kind, transaction.record.name)
    for transaction in transactions.updated:
        log.info(
            "[preview] Updated %s: %s (id %s)",
            kind,
            transaction.record.name,
            transaction.remote_id,
        )
    for transaction in transactions.deleted:
        log.info("[preview] Deleted %s: %s (id %s)", kind, transaction.name, transaction.remote_id)
    for failure in transactions.failures:
        log.info("[preview] Skipped %s: %s (%s)", kind, failure.record.name, failure.reason)
    log.info(
        "[preview] %s: %s unchanged",
        kind,
        len(transactions.unchanged),
    )
