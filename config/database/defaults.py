"""Database connection pool configuration."""

from __future__ import annotations

DRIVER = "postgresql+asyncpg"
PORT = 5432
MYSQL_PORT = 3306
SSL_MODE = "disable"
APP_NAME = "data-connector-lib"

MAX_OPEN_CONNS = 20
MAX_IDLE_CONNS = 10
CONN_MAX_LIFETIME = 3600
ECHO = False

__all__ = [
    "DRIVER",
    "PORT",
    "MYSQL_PORT",
    "SSL_MODE",
    "APP_NAME",
    "MAX_OPEN_CONNS",
    "MAX_IDLE_CONNS",
    "CONN_MAX_LIFETIME",
    "ECHO",
]
