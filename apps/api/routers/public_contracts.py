"""
공개 계약서 조회 API (서명 페이지용)
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.schemas import PublicContractResponse, serialize
from core.database.session import get_db_session
from core.logging.logger import logger
from shared.services.contract_service import CONTRACT_NOT_FOUND, ContractService

router = APIRouter(prefix="/contracts/public", tags=["public"])


@router.get("/{contract_id:int}")
async def get_public_contract(contract_id: int, db: AsyncSession = Depends(get_db_session)):
    """견적서, 소유자, 고객 내부 정보를 뺀 계약서."""
    try:
        contract = await ContractService(db).get_contract(contract_id, include_quote=False)
        if not contract:
            return JSONResponse({"error": CONTRACT_NOT_FOUND}, status_code=404)
        return JSONResponse(serialize(PublicContractResponse, contract))
    except Exception as e:
        logger.exception(f"Error getting public contract {contract_id}: {e}")
        return JSONResponse({"error": "계약서 조회 실패", "details": str(e)}, status_code=500)
