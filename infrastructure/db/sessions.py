"""Session management utilities for engines built by ``create_connection``."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

AsyncSessionFactory = async_sessionmaker[AsyncSession]


def get_session_factory(engine: AsyncEngine) -> AsyncSessionFactory:
    """Return an ``async_sessionmaker`` bound to ``engine``."""

    return async_sessionmaker(engine, expire_on_commit=False)


@asynccontextmanager
async def session_scope(factory: AsyncSessionFactory) -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations."""

    session = factory()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning("Rolled back database transaction: %s", exc)
        raise DatabaseError("Database operation failed", operation="transaction") from exc
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


__all__ = ["AsyncSessionFactory", "get_session_factory", "session_scope"]
