"""
인증 서비스: JWT 토큰과 비밀번호 해시
"""

import bcrypt
import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from core.config.settings import settings
from core.logging.logger import logger
from domain.entities.user import User


# bcrypt 는 앞 72바이트만 사용한다
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """bcrypt 입력 길이에 맞춰 UTF-8 바이트를 자른다."""
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """bcrypt 로 비밀번호를 해시한다. 72바이트를 넘는 부분은 무시된다."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교한다 (상수 시간 비교)."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # 저장된 값이 bcrypt 해시 형식이 아님
        logger.warning("Stored password hash has invalid format")
        return False


class AuthService:
    """JWT 세션 토큰 발급과 검증"""

    def __init__(self):
        self.secret_key = settings.secret_key
        self.algorithm = settings.jwt_algorithm
        self.token_expire_minutes = settings.jwt_expire_minutes

    async def create_token(self, user: User) -> str:
        """사용자 JWT 토큰 생성"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "exp": now + timedelta(minutes=self.token_expire_minutes),
            "iat": now
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """JWT 토큰 검증 및 디코딩"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return {
                "id": int(payload["sub"]),
                "email": payload.get("email"),
                "role": payload.get("role")
            }
        except jwt.ExpiredSignatureError:
            logger.debug("Session token expired")
            return None
        except (jwt.InvalidTokenError, KeyError, ValueError):
            logger.debug("Session token invalid")
            return None

    async def authenticate(self, session: AsyncSession, login: str, password: str) -> Optional[User]:
        """이메일 또는 아이디와 비밀번호로 사용자 확인"""
        result = await session.execute(
            select(User).where(or_(User.email == login, User.username == login))
        )
        user = result.scalars().first()
        if not user or not user.password:
            return None
        if not verify_password(password, user.password):
            logger.info("Login rejected: password mismatch", user_id=user.id)
            return None
        return user

    async def get_user_from_token(self, session: AsyncSession, token: str) -> Optional[User]:
        """토큰에서 사용자 조회"""
        user_data = await self.verify_token(token)
        if not user_data:
            return None
        return await session.get(User, user_data["id"])
