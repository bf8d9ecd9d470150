"""
로그인/로그아웃 API
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.dependencies import SESSION_COOKIE
from apps.api.schemas import LoginRequest, UserResponse, serialize
from core.config.settings import settings
from core.database.session import get_db_session
from core.logging.logger import logger
from shared.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db_session)):
    """이메일(또는 아이디)과 비밀번호로 로그인."""
    login_value = payload.email or payload.username
    if not login_value or not payload.password:
        return JSONResponse({"error": "이메일과 비밀번호를 입력해주세요"}, status_code=400)

    try:
        auth_service = AuthService()
        user = await auth_service.authenticate(db, login_value, payload.password)
        if not user:
            return JSONResponse({"error": "이메일 또는 비밀번호가 올바르지 않습니다"}, status_code=401)

        token = await auth_service.create_token(user)
    except Exception as e:
        logger.exception(f"Login error: {e}")
        return JSONResponse({"error": "서버 오류가 발생했습니다"}, status_code=500)

    logger.info("User logged in", user_id=user.id)
    response = JSONResponse({
        "success": True,
        "token": token,
        "user": serialize(UserResponse, user),
    })
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout():
    """세션 쿠키 삭제."""
    response = JSONResponse({"success": True})
    response.delete_cookie(key=SESSION_COOKIE)
    return response
