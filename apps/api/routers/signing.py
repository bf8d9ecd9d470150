"""
전자서명 API: OTP 발송/검증, 갑 서명 링크 생성, 서명
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.dependencies import require_user
from apps.api.schemas import (
    PublicContractResponse,
    SendOtpRequest,
    SignRequest,
    VerifyOtpRequest,
    serialize,
)
from core.config.settings import settings
from core.database.session import get_db_session
from core.logging.logger import logger
from domain.entities.user import User
from shared.services.exceptions import ServiceError
from shared.services.senders.email_sender import OtpEmailSender
from shared.services.signing_service import SigningService

router = APIRouter(prefix="/contracts", tags=["signing"])


@router.post("/send-otp")
async def send_otp(
    payload: SendOtpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
):
    """서명 토큰 확인 후 OTP 발급, 이메일 발송."""
    try:
        sign_token = await SigningService(db).issue_otp(payload.token, payload.email)
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error sending OTP: {e}")
        return JSONResponse({"error": "OTP 발송 실패", "details": str(e)}, status_code=500)

    background_tasks.add_task(
        OtpEmailSender().send_otp,
        sign_token.email,
        sign_token.otp,
        sign_token.contract.title,
    )

    content = {
        "success": True,
        "message": "OTP가 이메일로 발송되었습니다 (5분 유효)",
    }
    if not settings.is_production:
        content["developmentOtp"] = sign_token.otp
    return JSONResponse(content)


@router.post("/verify-otp")
async def verify_otp(payload: VerifyOtpRequest, db: AsyncSession = Depends(get_db_session)):
    """OTP 확인. 통과하면 공개 계약서와 토큰을 돌려준다."""
    try:
        sign_token = await SigningService(db).verify_otp(payload.token, payload.otp)
        return JSONResponse({
            "success": True,
            "verified": True,
            "contract": serialize(PublicContractResponse, sign_token.contract),
            "token": sign_token.token,
            "message": "OTP 검증 완료. 서명을 진행하세요.",
        })
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error verifying OTP: {e}")
        return JSONResponse({"error": "OTP 검증 실패", "details": str(e)}, status_code=500)


@router.post("/{contract_id:int}/generate-sign-token")
async def generate_sign_token(
    contract_id: int,
    request: Request,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """갑 서명 링크 생성 (계약서 소유자만)."""
    try:
        result = await SigningService(db).generate_sign_token(
            contract_id,
            user.id,
            origin=request.headers.get("origin"),
        )
        result["expiresAt"] = result["expiresAt"].isoformat()
        return JSONResponse(result)
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error generating sign token: {e}", contract_id=contract_id)
        return JSONResponse({"error": "토큰 생성 실패", "details": str(e)}, status_code=500)


@router.post("/{contract_id:int}/sign")
async def sign_contract(
    contract_id: int,
    payload: SignRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """서명 저장. 갑 서명은 토큰과 OTP 진행이 필요하다."""
    try:
        contract = await SigningService(db).sign_contract(contract_id, payload.model_dump())
        return JSONResponse(serialize(PublicContractResponse, contract))
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error signing contract: {e}", contract_id=contract_id)
        return JSONResponse({"error": "서명 실패", "details": str(e)}, status_code=500)
