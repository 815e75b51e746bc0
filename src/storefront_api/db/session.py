"""
storefront_api.db.session

Engine, session factory and schema bootstrap for the storefront database.

Responsibilities:
- Create the async engine from settings; SQLite connections enforce foreign keys
  so line items cannot point at missing orders or variants.
- Create the request-scoped session factory.
- Create the schema in dev/test (`init_db`).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront_api.db import models  # noqa: F401  # register models on Base.metadata
from storefront_api.db.base import Base
from storefront_api.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Handlers render orders after commit; keep loaded line items and variants usable.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# One session per request (`api.deps.db_session`), shared by the auth pipeline and
# the resource routers. Production schemas are managed outside the service.
