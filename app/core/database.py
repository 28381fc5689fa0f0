from typing import AsyncIterator
from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from app.core.config import Settings
import logging

logger = logging.getLogger(__name__)


class Database:
    """Async engine and session factory for one configured database."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: AsyncEngine = self._create_engine(settings)
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @staticmethod
    def _create_engine(settings: Settings) -> AsyncEngine:
        echo = settings.log_level.upper() == "DEBUG"
        if settings.is_sqlite:
            return create_async_engine(
                settings.database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )

        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=echo,
        )

        if settings.is_postgres:
            # Set search_path to the configured schema after connecting
            @event.listens_for(engine.sync_engine, "connect")
            def set_search_path(dbapi_connection, connection_record):
                logger.info("Setting search path to %s", settings.db_schema)
                cursor = dbapi_connection.cursor()
                cursor.execute(f"SET search_path TO {settings.db_schema}")
                cursor.close()

        return engine

    async def create_tables(self):
        logger.info("Creating database tables")
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def close(self):
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_async_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for getting database session"""
    async with get_database(request).session_maker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {type(e).__name__}: {e}")
            raise
