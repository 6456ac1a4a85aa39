"""Database engine factory.

Builds the connection URL from discrete settings and opens a pooled async
SQLAlchemy engine. Pool limits map onto SQLAlchemy's ``QueuePool`` as:

    max_idle_conns  -> pool_size      (connections kept open)
    max_open_conns  -> pool_size + max_overflow
    conn_max_lifetime -> pool_recycle (seconds)

Supports PostgreSQL (asyncpg) and MySQL (aiomysql) drivers; the driver is
detected from the ``driver`` prefix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from config.database.defaults import (
    APP_NAME,
    CONN_MAX_LIFETIME,
    DRIVER,
    ECHO,
    MAX_IDLE_CONNS,
    MAX_OPEN_CONNS,
    MYSQL_PORT,
    PORT,
    SSL_MODE,
)
from core.exceptions import DatabaseError
from core.utils.config_helpers import build_database_url, is_postgresql_driver
from core.utils.env import get_env

logger = logging.getLogger(__name__)


def _default_port(driver: str) -> int | None:
    if is_postgresql_driver(driver):
        return PORT
    if driver.split("+", 1)[0] == "mysql":
        return MYSQL_PORT
    return None


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    driver: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    port: int | str | None = None
    database: str = ""
    ssl_mode: str = ""
    app_name: str = ""
    max_open_conns: int = 0
    max_idle_conns: int = 0
    # Seconds, or a timedelta
    conn_max_lifetime: float | timedelta = 0

    @classmethod
    def from_env(cls, prefix: str = "DB_") -> "DatabaseConfig":
        """Read ``<prefix>HOST``, ``<prefix>USER`` ... from the environment."""

        def _value(name: str) -> str:
            return get_env(f"{prefix}{name}", default="") or ""

        def _number(name: str) -> int:
            raw = _value(name)
            return int(raw) if raw.strip().lstrip("-").isdigit() else 0

        return cls(
            driver=_value("DRIVER"),
            user=_value("USER"),
            password=_value("PASSWORD"),
            host=_value("HOST"),
            port=_value("PORT") or None,
            database=_value("DATABASE"),
            ssl_mode=_value("SSLMODE"),
            app_name=_value("APP_NAME"),
            max_open_conns=_number("MAX_OPEN_CONNS"),
            max_idle_conns=_number("MAX_IDLE_CONNS"),
            conn_max_lifetime=_number("CONN_MAX_LIFETIME"),
        )

    @property
    def lifetime_seconds(self) -> float:
        value = self.conn_max_lifetime
        if isinstance(value, timedelta):
            return value.total_seconds()
        return float(value or 0)

    def with_defaults(self) -> "DatabaseConfig":
        """Fill unset fields with library defaults; never rejects input."""

        driver = self.driver or DRIVER
        return replace(
            self,
            driver=driver,
            port=self.port or _default_port(driver),
            ssl_mode=self.ssl_mode or SSL_MODE,
            app_name=self.app_name or APP_NAME,
            max_open_conns=self.max_open_conns if self.max_open_conns > 0 else MAX_OPEN_CONNS,
            max_idle_conns=self.max_idle_conns if self.max_idle_conns > 0 else MAX_IDLE_CONNS,
            conn_max_lifetime=self.conn_max_lifetime if self.lifetime_seconds > 0 else CONN_MAX_LIFETIME,
        )

    def build_url(self) -> str:
        return build_database_url(
            self.user,
            self.password,
            self.host,
            self.database,
            driver=self.driver or DRIVER,
            port=self.port,
        )


def _connect_args(config: DatabaseConfig) -> dict[str, Any]:
    if is_postgresql_driver(config.driver):
        # asyncpg accepts libpq sslmode names for ``ssl``
        return {
            "ssl": config.ssl_mode,
            "server_settings": {"application_name": config.app_name},
        }
    return {"connect_timeout": 5}


def create_connection(config: DatabaseConfig, *, echo: bool = ECHO) -> AsyncEngine:
    """Return a pooled async engine for ``config`` (defaults filled first).

    The engine connects lazily; pool size follows ``max_idle_conns`` and the
    overflow tops it up to ``max_open_conns``.
    """

    resolved = config.with_defaults()
    pool_size = resolved.max_idle_conns
    max_overflow = max(resolved.max_open_conns - resolved.max_idle_conns, 0)

    try:
        engine = create_async_engine(
            resolved.build_url(),
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=int(resolved.lifetime_seconds),
            pool_pre_ping=True,
            connect_args=_connect_args(resolved),
        )
    except (SQLAlchemyError, ImportError) as exc:
        logger.error("Cannot create database engine for %s: %s", resolved.host, exc)
        raise DatabaseError("Cannot connect to db", operation="connect") from exc

    logger.info(
        "Database engine ready host=%s database=%s pool_size=%s max_overflow=%s",
        resolved.host,
        resolved.database,
        pool_size,
        max_overflow,
    )
    return engine


__all__ = ["DatabaseConfig", "create_connection"]
