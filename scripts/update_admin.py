"""
사용자 한 필드 수정 스크립트 (관리자 계정 관리용).

사용법:
    python scripts/update_admin.py --username admin --field role --value admin
    python scripts/update_admin.py --username admin --field password --value 'new-password'
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
from domain.entities.user import User
from shared.services.auth_service import hash_password

UPDATABLE_FIELDS = ("role", "email", "name", "password")


async def update_user_field(username: str, field: str, value: str) -> bool:
    """username 으로 사용자를 찾아 필드 하나를 바꾼다. 사용자가 없으면 False."""
    if field not in UPDATABLE_FIELDS:
        raise ValueError(f"Unsupported field: {field}")

    async with get_async_session() as session:
        result = await session.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if not user:
            logger.error("User not found", username=username)
            return False

        setattr(user, field, hash_password(value) if field == "password" else value)
        await session.commit()
        logger.info("User updated", username=username, field=field, user_id=user.id)
        return True


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="사용자 필드 수정")
    parser.add_argument("--username", default="admin", help="대상 사용자 아이디")
    parser.add_argument("--field", required=True, choices=UPDATABLE_FIELDS, help="수정할 필드")
    parser.add_argument("--value", required=True, help="새 값")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        updated = await update_user_field(args.username, args.field, args.value)
    except Exception as e:
        logger.exception(f"User update failed: {e}")
        return 1
    return 0 if updated else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
