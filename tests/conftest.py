"""
ContractDesk pytest 설정
SQLite 파일 DB, ASGI 클라이언트, 사용자/토큰 픽스처
"""
import os

# 설정 객체가 만들어지기 전에 테스트 환경을 지정
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./contractdesk_test.db")
os.environ.setdefault("LOG_FORMAT", "text")

import httpx
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.app import create_app
from core.database.session import db_manager
from domain.entities import Base
from shared.services.auth_service import AuthService
from tests.utils.test_helpers import TestDataFactory


# =============================================================================
# 실제 DB (SQLite) 픽스처
# =============================================================================

@pytest_asyncio.fixture
async def database(tmp_path):
    """테스트마다 새 SQLite 파일 DB 를 만들고 전역 db_manager 에 연결."""
    await db_manager.initialize(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with db_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db_manager

    await db_manager.close()


@pytest_asyncio.fixture
async def db_session(database):
    """테스트 데이터 준비용 세션."""
    async with database.get_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database):
    """ASGI 로 앱을 직접 호출하는 HTTP 클라이언트."""
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def owner(db_session):
    """계약서 소유자 (을)."""
    return await TestDataFactory.create_user(db_session)


@pytest_asyncio.fixture
async def auth_headers(owner):
    """소유자 JWT 를 담은 Authorization 헤더."""
    token = await AuthService().create_token(owner)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Unit 테스트용 목
# =============================================================================

@pytest.fixture
def mock_db_session():
    """DB 세션 목"""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session
