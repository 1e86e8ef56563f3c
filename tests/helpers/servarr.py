"""Reusable fakes and builders for reconciliation tests."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from arrsync.config.models import ServiceConfiguration
from arrsync.domain.errors import RemoteCallError
from arrsync.domain.guide import GuideCustomFormat, GuideReleaseProfile
from arrsync.domain.ports.guide import GuideProvider
from arrsync.domain.ports.persistence import IdentityCacheStore
from arrsync.domain.ports.remote import RemoteRecordClient
from arrsync.domain.records import DesiredRecord, RecordKind, RemoteRecord, ServiceType

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from arrsync.domain.documents import DocumentMapping


def make_custom_format_document(
    name: str,
    *,
    negate: bool = False,
    value: str = r"\bx265\b",
) -> DocumentMapping:
    return {
        "name": name,
        "includeCustomFormatWhenRenaming": False,
        "specifications": [
            {
                "name": "x265",
                "implementation": "ReleaseTitleSpecification",
                "negate": negate,
                "required": False,
                "fields": {"value": value},
            }
        ],
    }


def make_remote_custom_format_document(
    remote_id: int,
    name: str,
    *,
    negate: bool = False,
    value: str = r"\bx265\b",
) -> DocumentMapping:
    """Shape a service returns for a custom format created from ``make_custom_format_document``."""

    return {
        "id": remote_id,
        "name": name,
        "includeCustomFormatWhenRenaming": False,
        "specifications": [
            {
                "name": "x265",
                "implementation": "ReleaseTitleSpecification",
                "implementationName": "Release Title",
                "negate": negate,
                "required": False,
                "fields": [
                    {
                        "order": 0,
                        "name": "value",
                        "label": "Regular Expression",
                        "value": value,
                        "type": "textbox",
                    }
                ],
            }
        ],
    }


def make_desired_record(key: str, name: str, **document_options: object) -> DesiredRecord:
    return DesiredRecord(
        key=key,
        name=name,
        document=make_custom_format_document(name, **document_options),  # type: ignore[arg-type]
    )


def make_remote_record(remote_id: int, name: str, **document_options: object) -> RemoteRecord:
    return RemoteRecord(
        id=remote_id,
        name=name,
        document=make_remote_custom_format_document(remote_id, name, **document_options),  # type: ignore[arg-type]
    )


def make_guide_format(
    trash_id: str,
    name: str,
    *,
    default_score: int | None = None,
    remote_id: int | None = None,
) -> GuideCustomFormat:
    return GuideCustomFormat(
        trash_id=trash_id,
        name=name,
        document=make_custom_format_document(name),
        default_score=default_score,
        remote_id=remote_id,
    )


def make_config(
    service_type: ServiceType = ServiceType.RADARR,
    *,
    instance_name: str = "movies",
    **values: object,
) -> ServiceConfiguration:
    payload: dict[str, object] = {
        "service_type": service_type,
        "instance_name": instance_name,
        "base_url": "http://localhost:7878",
        "api_key": "secret",
    }
    payload.update(values)
    return ServiceConfiguration.model_validate(payload)


class InMemoryIdentityCacheStore(IdentityCacheStore):
    """Dictionary-backed identity cache store."""

    def __init__(self, entries: dict[tuple[str, RecordKind, str], int] | None = None) -> None:
        self.data: dict[tuple[str, RecordKind, str], int] = dict(entries or {})
        self.writes = 0

    def lookup(self, instance: str, kind: RecordKind, key: str) -> int | None:
        return self.data.get((instance, kind, key))

    def store(self, instance: str, kind: RecordKind, key: str, remote_id: int) -> None:
        self.writes += 1
        self.data[(instance, kind, key)] = remote_id

    def remove(self, instance: str, kind: RecordKind, key: str) -> None:
        self.writes += 1
        self.data.pop((instance, kind, key), None)

    def entries(self, instance: str, kind: RecordKind) -> dict[str, int]:
        return {
            key: remote_id
            for (entry_instance, entry_kind, key), remote_id in self.data.items()
            if entry_instance == instance and entry_kind == kind
        }


@dataclass(slots=True)
class RecordedCall:
    method: str
    kind: RecordKind
    remote_id: int | None = None
    payload: DocumentMapping | None = None


class FakeRemoteClient(RemoteRecordClient):
    """In-memory service instance that behaves like the REST API.

    Created records receive ids counting up from ``next_id``. Every call is
    recorded; ``fail_on`` makes the matching ``(method, kind)`` raise.
    """

    def __init__(
        self,
        records: dict[RecordKind, Iterable[RemoteRecord]] | None = None,
        *,
        next_id: int = 1,
        fail_on: set[tuple[str, RecordKind]] | None = None,
    ) -> None:
        self.records: dict[RecordKind, dict[int, RemoteRecord]] = {
            kind: {record.id: record for record in items} for kind, items in (records or {}).items()
        }
        self.next_id = next_id
        self.fail_on = fail_on or set()
        self.calls: list[RecordedCall] = []
        self.closed = False

    async def __aenter__(self) -> FakeRemoteClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.closed = True

    def mutating_calls(self) -> list[RecordedCall]:
        return [call for call in self.calls if call.method != "GET"]

    def stored(self, kind: RecordKind) -> list[RemoteRecord]:
        return list(self.records.get(kind, {}).values())

    async def get_records(self, kind: RecordKind) -> list[RemoteRecord]:
        self._record(RecordedCall("GET", kind))
        return [
            RemoteRecord(id=record.id, name=record.name, document=copy.deepcopy(record.document))
            for record in self.stored(kind)
        ]

    async def create_record(self, kind: RecordKind, payload: DocumentMapping) -> RemoteRecord:
        self._record(RecordedCall("POST", kind, payload=payload))
        remote_id = self.next_id
        self.next_id += 1
        document = copy.deepcopy(payload)
        document["id"] = remote_id
        record = RemoteRecord(id=remote_id, name=str(payload["name"]), document=document)
        self.records.setdefault(kind, {})[remote_id] = record
        return record

    async def update_record(
        self,
        kind: RecordKind,
        remote_id: int,
        payload: DocumentMapping,
    ) -> None:
        self._record(RecordedCall("PUT", kind, remote_id=remote_id, payload=payload))
        self.records[kind][remote_id] = RemoteRecord(
            id=remote_id,
            name=str(payload["name"]),
            document=copy.deepcopy(payload),
        )

    async def delete_record(self, kind: RecordKind, remote_id: int) -> None:
        self._record(RecordedCall("DELETE", kind, remote_id=remote_id))
        del self.records[kind][remote_id]

    def _record(self, call: RecordedCall) -> None:
        self.calls.append(call)
        if (call.method, call.kind) in self.fail_on:
            raise RemoteCallError(f"{call.method} {call.kind} failed", kind=call.kind)


@dataclass(slots=True)
class FakeGuide(GuideProvider):
    formats: dict[ServiceType, list[GuideCustomFormat]] = field(
        default_factory=dict[ServiceType, list[GuideCustomFormat]]
    )
    profiles: list[GuideReleaseProfile] = field(default_factory=list[GuideReleaseProfile])

    def custom_formats(self, service: ServiceType) -> list[GuideCustomFormat]:
        return list(self.formats.get(service, []))

    def release_profiles(self) -> list[GuideReleaseProfile]:
        return list(self.profiles)
