"""Guide data adapter."""

from __future__ import annotations

from .reader import FilesystemGuide, GuideNotFoundError
from .schema import CustomFormatPayload, ReleaseProfilePayload

__all__ = [
    "CustomFormatPayload",
    "FilesystemGuide",
    "GuideNotFoundError",
    "ReleaseProfilePayload",
]
