"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
import re

SECRET_ENV_PREFIX = "ARRSYNC"


def instance_secret_name(instance_name: str, prop: str) -> str:
    """Return the environment variable holding ``prop`` for ``instance_name``.

    ``instance_secret_name("movies-4k", "api_key")`` -> ``ARRSYNC_MOVIES_4K_API_KEY``
    """

    slug = re.sub(r"[^0-9A-Za-z]+", "_", instance_name).strip("_").upper()
    return f"{SECRET_ENV_PREFIX}_{slug}_{prop.upper()}"


def get_instance_secret(instance_name: str, prop: str) -> str | None:
    value = os.getenv(instance_secret_name(instance_name, prop))
    if value is None or not value.strip():
        return None
    return value.strip()
