"""
ContractDesk 메인 API 라우터
"""
from fastapi import APIRouter

from apps.api.routers.auth import router as auth_router
from apps.api.routers.contracts import router as contracts_router
from apps.api.routers.onboarding import router as onboarding_router
from apps.api.routers.public_contracts import router as public_contracts_router
from apps.api.routers.share import router as share_router
from apps.api.routers.signing import router as signing_router

api_router = APIRouter(prefix="/api")

# /contracts/public, /contracts/send-otp 를 /contracts/{id} 보다 먼저 등록
api_router.include_router(public_contracts_router)
api_router.include_router(signing_router)
api_router.include_router(contracts_router)
api_router.include_router(onboarding_router)
api_router.include_router(share_router)
api_router.include_router(auth_router)
