"""Helper utilities for configuration modules."""

from __future__ import annotations

from urllib.parse import quote_plus


def build_database_url(
    user: str,
    password: str | None,
    host: str,
    database: str,
    *,
    driver: str = "postgresql+asyncpg",
    port: int | str | None = None,
) -> str:
    """Build an async database connection string.

    Args:
        user: Database username
        password: Database password (can be None for socket auth)
        host: Database host (can include port as host:port)
        database: Database name
        driver: SQLAlchemy driver string (default: postgresql+asyncpg)
        port: Database port (optional, can also be in host)

    Returns:
        Async SQLAlchemy connection URL
    """
    credentials = quote_plus(user or "")
    if password:
        credentials = f"{credentials}:{quote_plus(password)}"

    # Handle port in host or separate port arg
    if port and ":" not in host:
        host_with_port = f"{host}:{port}"
    else:
        host_with_port = host

    return f"{driver}://{credentials}@{host_with_port}/{database}"


def is_postgresql_driver(driver: str) -> bool:
    """True when ``driver`` names a PostgreSQL dialect (``postgresql+asyncpg``)."""

    return (driver or "").split("+", 1)[0] in {"postgresql", "postgres"}


__all__ = ["build_database_url", "is_postgresql_driver"]
