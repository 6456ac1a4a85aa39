"""Utility helpers shared across core packages."""

from .config_helpers import build_database_url, is_postgresql_driver
from .env import get_bool_env, get_env

__all__ = [
    "build_database_url",
    "get_bool_env",
    "get_env",
    "is_postgresql_driver",
]
