from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from coffee_golf_bot.config import Config
from coffee_golf_bot.database.models import Base
from coffee_golf_bot.utils.logger import setup_logger

logger = setup_logger(__name__)

def to_async_url(database_url: str) -> str:
    """Swap a plain sqlite URL for its aiosqlite driver form."""
    if database_url.startswith('sqlite:///'):
        return 'sqlite+aiosqlite:///' + database_url[len('sqlite:///'):]
    return database_url

class Database:
    """Async SQLAlchemy engine holding the documents table."""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = to_async_url(database_url or Config.DATABASE_URL)
        self.engine: Optional[AsyncEngine] = None
        self.async_session: Optional[async_sessionmaker] = None

    async def initialize(self):
        """Create the engine and make sure the documents table exists"""
        self.engine = create_async_engine(self.database_url, echo=Config.DEBUG)
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database ready ({self.engine.url.get_backend_name()})")

    @asynccontextmanager
    async def get_session(self):
        """Session scope that commits on success and rolls back on error"""
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self):
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            logger.info("Database connection closed")
