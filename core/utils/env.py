"""Common environment helpers used by the ``from_env`` constructors."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "get_bool_env"]

_TRUTHY = {"1", "true", "yes", "on"}


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    """Return an environment variable and optionally enforce its presence."""

    value = os.getenv(key, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {key} not set", key=key)
    return value


def get_bool_env(key: str, default: bool = False) -> bool:
    """Return ``True`` when ``key`` holds one of the usual truthy spellings."""

    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY
