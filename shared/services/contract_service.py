"""계약서 집합(계약서, 고객, 견적서, 조항, 서명) 조회와 수정."""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.logging.logger import logger
from domain.entities.client import Client
from domain.entities.contract import Clause, Contract
from domain.entities.quote import Quote
from shared.services.exceptions import NotFoundError, ValidationError

CONTRACT_NOT_FOUND = "계약서를 찾을 수 없습니다"
DEFAULT_CLAUSE_TYPE = "custom"
DEFAULT_CLAUSE_TITLE = "사용자 정의"


def aggregate_options(include_quote: bool = True) -> list:
    """계약서 집합을 한 번에 읽어오는 로딩 옵션."""
    options = [
        selectinload(Contract.client),
        selectinload(Contract.clauses),
        selectinload(Contract.signatures),
    ]
    if include_quote:
        options.append(selectinload(Contract.quote).selectinload(Quote.service))
    return options


def build_clauses(clauses: List[Dict[str, Any]]) -> List[Clause]:
    """요청 배열 순서대로 조항을 만든다. order 는 1부터 다시 매긴다."""
    return [
        Clause(
            type=clause.get("type") or DEFAULT_CLAUSE_TYPE,
            title=clause.get("title") or DEFAULT_CLAUSE_TITLE,
            content=clause["content"],
            order=index + 1,
        )
        for index, clause in enumerate(clauses)
    ]


class ContractService:
    """계약서 서비스."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_contract(
        self,
        contract_id: int,
        include_quote: bool = True,
        refresh: bool = False,
    ) -> Optional[Contract]:
        """계약서 집합 조회. 조항은 order 오름차순, 서명은 최신순."""
        query = (
            select(Contract)
            .where(Contract.id == contract_id)
            .options(*aggregate_options(include_quote))
        )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_contract_or_404(self, contract_id: int, include_quote: bool = True) -> Contract:
        contract = await self.get_contract(contract_id, include_quote=include_quote)
        if not contract:
            raise NotFoundError(CONTRACT_NOT_FOUND)
        return contract

    async def update_contract(
        self,
        contract_id: int,
        clauses: Optional[List[Dict[str, Any]]] = None,
        title: Optional[str] = None,
        amount: Optional[int] = None,
    ) -> Contract:
        """계약서 수정.

        clauses 가 주어지면 기존 조항을 모두 지우고 새로 만든다 (병합하지 않음).
        """
        contract = await self.session.get(Contract, contract_id)
        if not contract:
            raise NotFoundError(CONTRACT_NOT_FOUND)

        if title is not None:
            contract.title = title
        if amount is not None:
            contract.amount = amount

        if clauses is not None:
            await self.session.execute(delete(Clause).where(Clause.contract_id == contract_id))
            for clause in build_clauses(clauses):
                clause.contract_id = contract_id
                self.session.add(clause)

        await self.session.commit()
        logger.info(
            "Contract updated",
            contract_id=contract_id,
            clause_count=len(clauses) if clauses is not None else None,
        )
        return await self.get_contract(contract_id, refresh=True)

    async def list_contracts(self, user_id: int) -> List[Contract]:
        """사용자의 계약서 목록 (최신순)."""
        result = await self.session.execute(
            select(Contract)
            .where(Contract.user_id == user_id)
            .options(*aggregate_options())
            .order_by(Contract.created_at.desc(), Contract.id.desc())
        )
        return list(result.scalars().all())

    async def create_contract(self, user_id: int, data: Dict[str, Any]) -> Contract:
        """계약서 생성. quote_id 가 있으면 견적서를 계약서로 전환한다."""
        clauses = data.get("clauses") or []
        if not clauses:
            raise ValidationError("선택된 조항이 없습니다")

        quote = None
        if data.get("quote_id"):
            quote = await self._get_owned_quote(user_id, data["quote_id"])

        if quote:
            title = data.get("title") or quote.title
            amount = quote.amount
            client_id = quote.client_id or await self._resolve_client_id(user_id, data)
        else:
            title = data.get("title") or "서비스 계약서"
            amount = data.get("amount") or 0
            client_id = await self._resolve_client_id(user_id, data)

        contract = Contract(
            user_id=user_id,
            client_id=client_id,
            quote_id=quote.id if quote else None,
            title=title,
            amount=amount,
            status="draft",
        )
        contract.clauses = build_clauses(clauses)
        self.session.add(contract)
        await self.session.commit()

        logger.info(
            "Contract created",
            contract_id=contract.id,
            user_id=user_id,
            quote_id=contract.quote_id,
            clause_count=len(clauses),
        )
        return await self.get_contract(contract.id, refresh=True)

    async def _get_owned_quote(self, user_id: int, quote_id: int) -> Optional[Quote]:
        result = await self.session.execute(
            select(Quote).where(Quote.id == quote_id, Quote.user_id == user_id)
        )
        quote = result.scalar_one_or_none()
        if not quote:
            logger.warning("Quote for conversion not found", quote_id=quote_id, user_id=user_id)
        return quote

    async def _resolve_client_id(self, user_id: int, data: Dict[str, Any]) -> int:
        """client_id 로 찾거나, 이름/이메일로 기존 고객을 찾고 없으면 만든다."""
        if data.get("client_id"):
            result = await self.session.execute(
                select(Client).where(Client.id == data["client_id"], Client.user_id == user_id)
            )
            client = result.scalar_one_or_none()
            if not client:
                raise NotFoundError("고객을 찾을 수 없습니다")
            return client.id

        client_data = data.get("client") or {}
        name = client_data.get("name")
        if not name:
            raise ValidationError("고객 이름이 필요합니다")

        conditions = [Client.name == name]
        if client_data.get("email"):
            conditions.append(Client.email == client_data["email"])
        result = await self.session.execute(
            select(Client).where(Client.user_id == user_id, or_(*conditions))
        )
        client = result.scalars().first()
        if client:
            return client.id

        client = Client(
            user_id=user_id,
            name=name,
            email=client_data.get("email") or "",
            phone=client_data.get("phone") or "",
            company=client_data.get("company") or "",
        )
        self.session.add(client)
        await self.session.flush()
        return client.id
