"""
데이터베이스 세션 팩토리
"""

from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from core.config.settings import settings
from core.logging.logger import logger


class DatabaseManager:
    """프로세스 단위 엔진과 세션 팩토리를 관리한다."""

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, database_url: Optional[str] = None):
        """데이터베이스 연결 풀을 초기화한다."""
        if self._initialized:
            return

        url = database_url or settings.async_database_url
        engine_kwargs = {"echo": settings.database_echo, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_recycle=3600,
            )

        try:
            self.engine = create_async_engine(url, **engine_kwargs)
            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False
            )
            self._initialized = True
            logger.info("Database connection initialized successfully", driver=self.engine.dialect.name)

        except Exception as e:
            logger.error(f"Failed to initialize database connection: {e}")
            raise

    async def close(self):
        """연결 풀을 정리한다."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self._initialized = False
            logger.info("Database connection closed")

    def get_session(self) -> AsyncSession:
        """새 세션을 반환한다."""
        if not self._initialized:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        return self.session_factory()


# 전역 DB 매니저
db_manager = DatabaseManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 Dependency."""
    async with get_async_session() as session:
        yield session


async def init_database(database_url: Optional[str] = None):
    """데이터베이스를 초기화한다."""
    await db_manager.initialize(database_url)


async def close_database():
    """데이터베이스 연결을 닫는다."""
    await db_manager.close()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """세션 컨텍스트 매니저.

    필요하면 연결을 지연 초기화하고, 사용 후 세션을 반드시 닫는다.
    사용법:
        async with get_async_session() as session:
            ...
    """
    if not db_manager.is_initialized:
        await db_manager.initialize()
    session = db_manager.get_session()
    try:
        yield session
    finally:
        await session.close()
