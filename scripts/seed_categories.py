"""
기본 조항 카테고리 시드 스크립트.

이미 있는 카테고리(이름 기준)는 건너뛰므로 여러 번 실행해도 안전하다.
"""

import asyncio
import sys
import os
from typing import Tuple

# 프로젝트 루트를 path 에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy import select

from core.database.session import get_async_session
from core.logging.logger import logger
from domain.entities.clause_category import ClauseCategory

BASE_CATEGORIES = [
    {"name": "거래/구매", "description": "물건·서비스 사고팔 때 사용하는 계약"},
    {"name": "용역/프로젝트", "description": "프리랜서, 외주, 협업 등 작업 계약"},
    {"name": "근로/고용", "description": "사람을 고용하거나 채용할 때 사용"},
    {"name": "투자/자금", "description": "돈 빌려주거나 투자받을 때 사용"},
    {"name": "파트너십/제휴", "description": "공동사업, 협업, 합작 등"},
    {"name": "비밀/보안", "description": "정보 보호 관련 계약"},
    {"name": "기타/일반", "description": "임대차, 양도, 간단 합의 등"},
]


async def seed_categories() -> Tuple[int, int]:
    """기본 카테고리 생성. (생성 수, 건너뛴 수) 반환."""
    created = 0
    skipped = 0
    async with get_async_session() as session:
        result = await session.execute(select(ClauseCategory.name))
        existing = set(result.scalars().all())

        for definition in BASE_CATEGORIES:
            if definition["name"] in existing:
                skipped += 1
                logger.info(f"Category exists, skipped: {definition['name']}")
                continue

            session.add(ClauseCategory(
                name=definition["name"],
                description=definition["description"],
                level=1,
                is_default=True,
            ))
            created += 1
            logger.info(f"Category created: {definition['name']}")

        await session.commit()

    logger.info("Category seeding finished", created=created, skipped=skipped)
    return created, skipped


async def main() -> int:
    try:
        await seed_categories()
        return 0
    except Exception as e:
        logger.exception(f"Category seeding failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
