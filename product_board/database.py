"""SQLite storage for the product board."""

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .store.models import Base

DEFAULT_DATABASE_PATH = "data/products.db"


def get_database_url(db_path: Optional[str] = None) -> str:
    """SQLite URL for ``db_path`` (or ``DATABASE_PATH``); the parent directory is created."""
    path = Path(db_path or os.getenv("DATABASE_PATH", DEFAULT_DATABASE_PATH))
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path}"


class Database:
    """An async engine and the session factory bound to it."""

    def __init__(self, db_path: Optional[str] = None, echo: bool = False):
        self.url = get_database_url(db_path)
        self.engine: AsyncEngine = create_async_engine(self.url, echo=echo)
        # Rows stay readable after commit, so services can return them
        self.sessions = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Session whose work is committed when the block exits, or rolled back if it raises."""
        async with self.sessions.begin() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
