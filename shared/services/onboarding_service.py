"""온보딩 완료 처리와 데모 데이터 정리."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database.session import get_async_session
from core.logging.logger import logger
from core.utils.timezone_helper import to_naive_utc, utc_now
from domain.entities.client import Client
from domain.entities.contract import Contract
from domain.entities.quote import Quote
from domain.entities.service import Service
from domain.entities.user import User


class OnboardingService:
    """사용자 온보딩 상태 관리."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def complete(self, user: User, completed_at: Optional[datetime] = None) -> User:
        """온보딩 완료 플래그와 완료 시각을 저장한다."""
        user.onboarding_completed = True
        user.onboarding_completed_at = to_naive_utc(completed_at) or utc_now()
        await self.session.commit()
        logger.info("Onboarding completed", user_id=user.id)
        return user


class DemoDataCleaner:
    """온보딩 이후 데모 데이터를 삭제하는 분리된 작업.

    자체 세션을 열고, 실패는 로그로만 남긴다. 호출한 요청의 결과에는
    영향을 주지 않는다. 모델별로 따로 커밋하므로 한 단계가 실패해도
    앞 단계의 삭제는 유지되고 다음 단계는 계속 진행된다.
    """

    # 외래 키 순서: 계약서 → 견적서 → 고객 → 서비스
    MODELS = (Contract, Quote, Client, Service)

    async def run(self, user_id: int) -> bool:
        try:
            async with get_async_session() as session:
                deleted = await self.cleanup(session, user_id)
            return None not in deleted.values()
        except Exception:
            # 정리에 실패해도 온보딩 완료는 성공으로 처리
            logger.exception("Demo data cleanup failed", user_id=user_id)
            return False

    async def cleanup(self, session: AsyncSession, user_id: int) -> dict:
        """모델별 삭제 건수를 반환한다. 실패한 단계는 None."""
        deleted = {}
        for model in self.MODELS:
            table = model.__tablename__
            try:
                result = await session.execute(
                    delete(model).where(model.user_id == user_id, model.is_demo.is_(True))
                )
                await session.commit()
                deleted[table] = result.rowcount
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Demo data cleanup step failed", user_id=user_id, table=table)
                deleted[table] = None
        logger.info("Demo data cleaned up", user_id=user_id, **deleted)
        return deleted
