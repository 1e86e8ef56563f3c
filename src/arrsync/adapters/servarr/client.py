"""HTTP client for the Radarr/Sonarr v3 APIs."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError

from arrsync.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient
from arrsync.domain.errors import RemoteCallError
from arrsync.domain.ports.remote import RemoteRecordClient
from arrsync.domain.records import RecordKind, RemoteRecord

from .schema import RecordPayload

if TYPE_CHECKING:
    from types import TracebackType

    from arrsync.config.models import ServiceConfiguration
    from arrsync.domain.documents import DocumentMapping

log = getLogger(__name__)

API_PATH = "/api/v3/"
_DEFAULT_TIMEOUT_SECONDS = 30.0

RESOURCE_BY_KIND: dict[RecordKind, str] = {
    RecordKind.CUSTOM_FORMAT: "customformat",
    RecordKind.QUALITY_PROFILE: "qualityprofile",
    RecordKind.RELEASE_PROFILE: "releaseprofile",
    RecordKind.TAG: "tag",
}


def _default_resilience_config(config: ServiceConfiguration) -> ResilienceConfig:
    return ResilienceConfig(
        name=config.instance_name,
        base_url=config.base_url + API_PATH,
        timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"X-Api-Key": config.api_key},
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ServarrClient(RemoteRecordClient):
    """``RemoteRecordClient`` backed by one service instance's REST API."""

    def __init__(self, http: ResilientClient, *, instance_name: str) -> None:
        self._http = http
        self.instance_name = instance_name

    async def __aenter__(self) -> ServarrClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_records(self, kind: RecordKind) -> list[RemoteRecord]:
        response = await self._send("GET", kind)
        payload = self._decode(response, kind)
        if not isinstance(payload, list):
            raise RemoteCallError(
                f"Expected a list of {kind} records from {self.instance_name}",
                kind=kind,
            )
        return [self._to_record(item, kind) for item in cast("list[object]", payload)]

    async def create_record(self, kind: RecordKind, payload: DocumentMapping) -> RemoteRecord:
        name = payload.get("name")
        response = await self._send("POST", kind, payload=payload, identifier=str(name))
        return self._to_record(self._decode(response, kind), kind)

    async def update_record(
        self,
        kind: RecordKind,
        remote_id: int,
        payload: DocumentMapping,
    ) -> None:
        await self._send("PUT", kind, remote_id, payload=payload, identifier=remote_id)

    async def delete_record(self, kind: RecordKind, remote_id: int) -> None:
        await self._send("DELETE", kind, remote_id, identifier=remote_id)

    async def _send(
        self,
        method: str,
        kind: RecordKind,
        remote_id: int | None = None,
        *,
        payload: DocumentMapping | None = None,
        identifier: int | str | None = None,
    ) -> httpx.Response:
        url = _resource_path(kind, remote_id)
        log.debug("%s %s on %s", method, url, self.instance_name)
        try:
            if payload is None:
                response = await self._http.request(method, url)
            else:
                response = await self._http.request(method, url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteCallError(
                f"{method} {url} on {self.instance_name} failed with status "
                f"{exc.response.status_code}: {_error_detail(exc.response)}",
                kind=kind,
                identifier=identifier,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteCallError(
                f"{method} {url} on {self.instance_name} failed: {exc}",
                kind=kind,
                identifier=identifier,
            ) from exc
        return response

    def _decode(self, response: httpx.Response, kind: RecordKind) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteCallError(
                f"Invalid JSON in {kind} response from {self.instance_name}",
                kind=kind,
            ) from exc

    def _to_record(self, item: object, kind: RecordKind) -> RemoteRecord:
        try:
            parsed = RecordPayload.model_validate(item)
        except ValidationError as exc:
            raise RemoteCallError(
                f"Unexpected {kind} payload from {self.instance_name}: {exc}",
                kind=kind,
            ) from exc
        return RemoteRecord(
            id=parsed.id,
            name=parsed.name,
            document=cast("DocumentMapping", item),
        )


def _resource_path(kind: RecordKind, remote_id: int | None = None) -> str:
    resource = RESOURCE_BY_KIND[kind]
    if remote_id is None:
        return resource
    return f"{resource}/{remote_id}"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, list):
        # validation failures come back as a list of {propertyName, errorMessage}
        messages = [
            str(entry.get("errorMessage"))
            for entry in cast("list[dict[str, object]]", body)
            if isinstance(entry, dict)
        ]
        return "; ".join(messages) or str(body)
    return str(body)


def build_servarr_client(
    config: ServiceConfiguration,
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
) -> ServarrClient:
    return ServarrClient(
        client_factory(_default_resilience_config(config)),
        instance_name=config.instance_name,
    )
