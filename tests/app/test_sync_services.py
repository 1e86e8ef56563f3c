from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from arrsync.app import (
    ExitStatus,
    delete_custom_formats,
    list_custom_formats,
    sync_services,
)
from arrsync.config import ConfigFilterCriteria, ConfigurationRegistry, InvalidInstancesError
from arrsync.config.models import ServiceConfiguration  # noqa: TC001
from arrsync.domain.records import RecordKind, RemoteRecord, ServiceType
from tests.helpers.servarr import (
    FakeGuide,
    FakeRemoteClient,
    InMemoryIdentityCacheStore,
    make_guide_format,
)

CONFIG_YAML = """
radarr:
  movies:
    base_url: http://radarr:7878
    api_key: key
    custom_formats:
      - trash_ids: [a1]
  movies-4k:
    base_url: http://radarr4k:7878
    api_key: key
    custom_formats:
      - trash_ids: [a1]
"""


@pytest.fixture
def registry(tmp_path: Path) -> ConfigurationRegistry:
    (tmp_path / "arrsync.yml").write_text(CONFIG_YAML, encoding="utf-8")
    return ConfigurationRegistry(tmp_path)


@pytest.fixture
def guide() -> FakeGuide:
    return FakeGuide(
        formats={
            ServiceType.RADARR: [
                make_guide_format("b2", "HDR"),
                make_guide_format("a1", "x265"),
            ]
        }
    )


class ClientFactory:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.clients: dict[str, FakeRemoteClient] = {}

    def __call__(self, config: ServiceConfiguration) -> FakeRemoteClient:
        fail_on = (
            {("POST", RecordKind.CUSTOM_FORMAT)} if config.instance_name in self.failing else None
        )
        client = self.clients.get(config.instance_name)
        if client is None:
            client = FakeRemoteClient(next_id=1, fail_on=fail_on)
            self.clients[config.instance_name] = client
        return client


def test_sync_services_processes_every_instance(
    registry: ConfigurationRegistry,
    guide: FakeGuide,
) -> None:
    factory = ClientFactory()
    store = InMemoryIdentityCacheStore()

    report = sync_services(
        registry=registry,
        guide=guide,
        cache_store=store,
        client_factory=factory,  # type: ignore[arg-type]
    )

    assert report.exit_status is ExitStatus.SUCCEEDED
    assert [outcome.instance_name for outcome in report.outcomes] == ["movies", "movies-4k"]
    assert store.entries("movies", RecordKind.CUSTOM_FORMAT) == {"a1": 1}
    assert store.entries("movies-4k", RecordKind.CUSTOM_FORMAT) == {"a1": 1}
    assert all(client.closed for client in factory.clients.values())


def test_failed_instance_does_not_stop_the_rest(
    registry: ConfigurationRegistry,
    guide: FakeGuide,
) -> None:
    factory = ClientFactory(failing={"movies"})

    report = sync_services(
        registry=registry,
        guide=guide,
        cache_store=InMemoryIdentityCacheStore(),
        client_factory=factory,  # type: ignore[arg-type]
    )

    assert report.exit_status is ExitStatus.FAILED
    assert [outcome.instance_name for outcome in report.failed] == ["movies"]
    assert report.outcomes[1].succeeded
    assert len(factory.clients["movies-4k"].stored(RecordKind.CUSTOM_FORMAT)) == 1


def test_configuration_errors_abort_before_any_instance(
    registry: ConfigurationRegistry,
    guide: FakeGuide,
) -> None:
    factory = ClientFactory()

    with pytest.raises(InvalidInstancesError):
        sync_services(
            criteria=ConfigFilterCriteria(instances=("unknown",)),
            registry=registry,
            guide=guide,
            cache_store=InMemoryIdentityCacheStore(),
            client_factory=factory,  # type: ignore[arg-type]
        )

    assert factory.clients == {}


def test_list_custom_formats_sorted_by_name(guide: FakeGuide) -> None:
    formats = list_custom_formats(ServiceType.RADARR, guide=guide)

    assert [item.name for item in formats] == ["HDR", "x265"]


def _remote_formats() -> list[RemoteRecord]:
    return [
        RemoteRecord(id=1, name="x265", document={"id": 1, "name": "x265"}),
        RemoteRecord(id=2, name="HDR", document={"id": 2, "name": "HDR"}),
    ]


def test_delete_custom_formats_by_name(registry: ConfigurationRegistry) -> None:
    client = FakeRemoteClient({RecordKind.CUSTOM_FORMAT: _remote_formats()})
    store = InMemoryIdentityCacheStore({("movies", RecordKind.CUSTOM_FORMAT, "a1"): 1})

    result = delete_custom_formats(
        "movies",
        ["X265", "missing"],
        registry=registry,
        cache_store=store,
        client_factory=lambda _: client,  # type: ignore[arg-type,return-value]
    )

    assert result.deleted == 1
    assert [record.name for record in client.stored(RecordKind.CUSTOM_FORMAT)] == ["HDR"]
    assert store.entries("movies", RecordKind.CUSTOM_FORMAT) == {}


def test_delete_all_custom_formats_preview(registry: ConfigurationRegistry) -> None:
    client = FakeRemoteClient({RecordKind.CUSTOM_FORMAT: _remote_formats()})

    result = delete_custom_formats(
        "movies",
        delete_all=True,
        preview=True,
        registry=registry,
        cache_store=InMemoryIdentityCacheStore(),
        client_factory=lambda _: client,  # type: ignore[arg-type,return-value]
    )

    assert result.deleted == 2
    assert client.mutating_calls() == []


def test_delete_requires_names_or_all(registry: ConfigurationRegistry) -> None:
    with pytest.raises(ValueError, match="custom format names"):
        delete_custom_formats("movies", registry=registry)
