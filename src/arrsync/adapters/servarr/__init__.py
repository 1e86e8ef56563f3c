"""Async client for Radarr/Sonarr v3 APIs."""

from __future__ import annotations

from .client import RESOURCE_BY_KIND, ServarrClient, build_servarr_client
from .schema import RecordPayload

__all__ = [
    "RESOURCE_BY_KIND",
    "RecordPayload",
    "ServarrClient",
    "build_servarr_client",
]
