"""
온보딩 완료 API
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.dependencies import require_user
from apps.api.schemas import OnboardingCompleteRequest
from core.database.session import get_db_session
from core.logging.logger import logger
from domain.entities.user import User
from shared.services.onboarding_service import DemoDataCleaner, OnboardingService

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post("/complete")
async def complete_onboarding(
    background_tasks: BackgroundTasks,
    payload: Optional[OnboardingCompleteRequest] = None,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """온보딩 완료 표시 후 데모 데이터 정리를 예약한다."""
    user_id = user.id
    completed_at = payload.completed_at if payload else None
    try:
        user = await OnboardingService(db).complete(user, completed_at)
    except Exception as e:
        logger.exception(f"Error completing onboarding: {e}", user_id=user_id)
        return JSONResponse({"error": "서버 오류가 발생했습니다"}, status_code=500)

    # 응답과 무관하게 별도 세션에서 실행
    background_tasks.add_task(DemoDataCleaner().run, user_id)

    return JSONResponse({
        "success": True,
        "message": "온보딩이 완료되었습니다.",
        "user": {
            "id": user.id,
            "onboardingCompleted": user.onboarding_completed,
            "onboardingCompletedAt": user.onboarding_completed_at.isoformat(),
        },
    })
