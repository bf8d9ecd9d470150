"""
계약서 조회/수정/생성 API
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.dependencies import require_user
from apps.api.schemas import (
    ContractCreateRequest,
    ContractResponse,
    ContractUpdateRequest,
    serialize,
)
from core.database.session import get_db_session
from core.logging.logger import logger
from domain.entities.user import User
from shared.services.contract_service import CONTRACT_NOT_FOUND, ContractService
from shared.services.exceptions import ServiceError

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("")
async def list_contracts(
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """내 계약서 목록 (최신순)."""
    try:
        contracts = await ContractService(db).list_contracts(user.id)
        return JSONResponse([serialize(ContractResponse, contract) for contract in contracts])
    except Exception as e:
        logger.exception(f"Error listing contracts: {e}", user_id=user.id)
        return JSONResponse({"error": "계약 처리 실패", "details": str(e)}, status_code=500)


@router.post("")
async def create_contract(
    payload: ContractCreateRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """계약서 생성. quoteId 가 있으면 견적서를 계약서로 전환한다."""
    try:
        contract = await ContractService(db).create_contract(user.id, payload.model_dump())
        return JSONResponse(serialize(ContractResponse, contract), status_code=201)
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error creating contract: {e}", user_id=user.id)
        return JSONResponse({"error": "계약 처리 실패", "details": str(e)}, status_code=500)


@router.get("/{contract_id:int}")
async def get_contract(contract_id: int, db: AsyncSession = Depends(get_db_session)):
    """계약서 집합 조회."""
    try:
        contract = await ContractService(db).get_contract(contract_id)
        if not contract:
            return JSONResponse({"error": CONTRACT_NOT_FOUND}, status_code=404)
        return JSONResponse(serialize(ContractResponse, contract))
    except Exception as e:
        logger.exception(f"Error getting contract {contract_id}: {e}")
        return JSONResponse({"error": "서버 오류가 발생했습니다"}, status_code=500)


@router.put("/{contract_id:int}")
async def update_contract(
    contract_id: int,
    payload: ContractUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """계약서 수정. clauses 가 오면 조항 전체를 교체한다."""
    clauses = None
    if payload.clauses is not None:
        clauses = [clause.model_dump() for clause in payload.clauses]

    try:
        contract = await ContractService(db).update_contract(
            contract_id,
            clauses=clauses,
            title=payload.title,
            amount=payload.amount,
        )
        return JSONResponse(serialize(ContractResponse, contract))
    except ServiceError as e:
        return JSONResponse(e.to_payload(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Error updating contract {contract_id}: {e}")
        return JSONResponse({"error": "서버 오류가 발생했습니다"}, status_code=500)
