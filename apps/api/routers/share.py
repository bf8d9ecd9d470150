"""
서비스 공유 링크 API: 비밀번호 확인, 링크 생성/목록
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.dependencies import require_user
from apps.api.schemas import ShareCreateRequest, ShareVerifyRequest
from core.database.session import get_db_session
from core.logging.logger import logger
from domain.entities.user import User
from shared.services.exceptions import ServiceError
from shared.services.share_service import ShareService

router = APIRouter(tags=["share"])


@router.post("/share/verify")
async def verify_share_password(payload: ShareVerifyRequest, db: AsyncSession = Depends(get_db_session)):
    """공유 링크 비밀번호 확인."""
    try:
        await ShareService(db).verify_password(payload.token, payload.password)
        return JSONResponse({"success": True, "message": "비밀번호가 확인되었습니다."})
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error verifying share password: {e}")
        return JSONResponse({"error": "서버 오류가 발생했습니다."}, status_code=500)


@router.get("/services/share")
async def list_share_links(
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """내 공유 링크 목록."""
    try:
        links = await ShareService(db).list_links(user.id)
        return JSONResponse(jsonable_encoder({"links": links}))
    except Exception as e:
        logger.exception(f"Error listing share links: {e}", user_id=user.id)
        return JSONResponse({"error": "공유 링크 조회에 실패했습니다."}, status_code=500)


@router.post("/services/share")
async def create_share_link(
    payload: ShareCreateRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """공유 링크 생성."""
    try:
        link = await ShareService(db).create_link(user.id, payload.model_dump())
        return JSONResponse(
            {
                "message": "공유 링크가 생성되었습니다.",
                "link": {
                    "id": link.id,
                    "token": link.token,
                    "url": f"/share/{link.token}",
                    "title": link.title,
                    "serviceCount": len(link.services),
                    "hasPassword": bool(link.password),
                    "expiryDate": link.expiry_date.isoformat() if link.expiry_date else None,
                },
            },
            status_code=201,
        )
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error creating share link: {e}", user_id=user.id)
        return JSONResponse({"error": "공유 링크 생성에 실패했습니다."}, status_code=500)
