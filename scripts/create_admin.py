"""
관리자 계정 생성 스크립트.

같은 이메일의 사용자가 있으면 아무것도 하지 않는다.
"""

import argparse
import asyncio
import sys
import os

# 프로젝트 루트를 path 에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy import select

from core.database.session import get_async_session
from core.logging.logger import logger
from core.utils.timezone_helper import utc_now
from domain.entities.user import User, UserRole
from shared.services.auth_service import hash_password

DEFAULT_ADMIN_EMAIL = "cs@shopidream.com"
DEFAULT_ADMIN_NAME = "Administrator"


async def create_admin(email: str, password: str, username: str = "admin", name: str = DEFAULT_ADMIN_NAME) -> bool:
    """관리자 생성. 새로 만들었으면 True."""
    async with get_async_session() as session:
        result = await session.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            logger.info("Admin account already exists", email=email)
            return False

        admin = User(
            username=username,
            email=email,
            password=hash_password(password),
            name=name,
            role=UserRole.ADMIN.value,
            email_verified_at=utc_now(),
        )
        session.add(admin)
        await session.commit()
        logger.info("Admin account created", email=email, user_id=admin.id)
        return True


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="관리자 계정 생성")
    parser.add_argument("--email", default=DEFAULT_ADMIN_EMAIL)
    parser.add_argument("--username", default="admin")
    parser.add_argument("--name", default=DEFAULT_ADMIN_NAME)
    parser.add_argument("--password", required=True, help="초기 비밀번호 (로그인 후 변경)")
    args = parser.parse_args(argv)

    try:
        await create_admin(args.email, args.password, username=args.username, name=args.name)
    except Exception as e:
        logger.exception(f"Admin creation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
