"""
FastAPI 의존성: JWT 로 현재 사용자 확인
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.database.session import get_db_session
from domain.entities.user import User
from shared.services.auth_service import AuthService
from shared.services.exceptions import UnauthorizedError

SESSION_COOKIE = "access_token"


def extract_token(request: Request) -> Optional[str]:
    """access_token 쿠키, 없으면 Authorization: Bearer 헤더."""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """토큰이 유효하면 사용자, 아니면 None."""
    token = extract_token(request)
    if not token:
        return None
    return await AuthService().get_user_from_token(session, token)


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """인증된 사용자. 없으면 401."""
    if user is None:
        raise UnauthorizedError()
    return user
