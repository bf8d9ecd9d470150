"""
ContractDesk 테스트 유틸리티와 헬퍼
"""
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.database.session import db_manager
from core.utils.timezone_helper import utc_now
from domain.entities.client import Client
from domain.entities.contract import Clause, Contract, Signature, SignerType
from domain.entities.quote import Quote
from domain.entities.service import Service, SharedService
from domain.entities.sign_token import SignToken
from domain.entities.user import User
from shared.services.auth_service import hash_password


class TestDataFactory:
    """테스트 데이터를 DB 에 만드는 팩토리"""

    @staticmethod
    async def create_user(
        session: AsyncSession,
        email: str = "owner@example.com",
        username: str = "owner",
        password: str = "owner-password",
        name: str = "홍길동",
        role: str = "user",
    ) -> User:
        user = User(
            email=email,
            username=username,
            password=hash_password(password),
            name=name,
            role=role,
            onboarding_completed=False,
        )
        session.add(user)
        await session.commit()
        return user

    @staticmethod
    async def create_client(
        session: AsyncSession,
        user: User,
        name: str = "(주)갑회사",
        email: Optional[str] = "client@example.com",
        is_demo: bool = False,
    ) -> Client:
        client = Client(
            user_id=user.id,
            name=name,
            email=email,
            phone="010-1234-5678",
            company=name,
            business_number="123-45-67890",
            memo="내부 메모",
            is_demo=is_demo,
        )
        session.add(client)
        await session.commit()
        return client

    @staticmethod
    async def create_service(session: AsyncSession, user: User, title: str = "웹사이트 제작", price: int = 1000000, is_demo: bool = False) -> Service:
        service = Service(user_id=user.id, title=title, price=price, is_demo=is_demo)
        session.add(service)
        await session.commit()
        return service

    @staticmethod
    async def create_quote(
        session: AsyncSession,
        user: User,
        client: Optional[Client] = None,
        service: Optional[Service] = None,
        title: str = "웹사이트 제작 견적",
        amount: int = 500000,
        is_demo: bool = False,
    ) -> Quote:
        quote = Quote(
            user_id=user.id,
            client_id=client.id if client else None,
            service_id=service.id if service else None,
            title=title,
            amount=amount,
            status="sent",
            is_demo=is_demo,
        )
        session.add(quote)
        await session.commit()
        return quote

    @staticmethod
    async def create_contract(
        session: AsyncSession,
        user: User,
        client: Optional[Client] = None,
        clauses: Optional[List[str]] = None,
        title: str = "웹사이트 제작 계약서",
        amount: int = 1000000,
        is_demo: bool = False,
    ) -> Contract:
        contract = Contract(
            user_id=user.id,
            client_id=client.id if client else None,
            title=title,
            amount=amount,
            status="draft",
            is_demo=is_demo,
        )
        contract.clauses = [
            Clause(type="custom", title=f"제{index + 1}조", content=content, order=index + 1)
            for index, content in enumerate(clauses or ["목적", "대금 지급"])
        ]
        session.add(contract)
        await session.commit()
        return contract

    @staticmethod
    async def create_signature(
        session: AsyncSession,
        contract: Contract,
        signer_type: str = SignerType.FREELANCER,
        signed_at: Optional[datetime] = None,
    ) -> Signature:
        signature = Signature(
            contract_id=contract.id,
            signer_type=signer_type,
            signer_name="서명자",
            signer_email="",
            signature_data="data:image/png;base64,AAAA",
            signature_type="canvas",
            signed_at=signed_at or utc_now(),
        )
        session.add(signature)
        await session.commit()
        return signature

    @staticmethod
    async def create_sign_token(
        session: AsyncSession,
        contract: Contract,
        token: str = "a" * 64,
        email: str = "client@example.com",
        expires_in: timedelta = timedelta(hours=24),
        is_used: bool = False,
        otp: Optional[str] = None,
        otp_expires_in: Optional[timedelta] = None,
    ) -> SignToken:
        now = utc_now()
        sign_token = SignToken(
            contract_id=contract.id,
            token=token,
            signer_type=SignerType.CLIENT,
            email=email,
            expires_at=now + expires_in,
            is_used=is_used,
            otp=otp,
            otp_expiry=now + otp_expires_in if otp_expires_in is not None else None,
        )
        session.add(sign_token)
        await session.commit()
        return sign_token

    @staticmethod
    async def create_shared_service(
        session: AsyncSession,
        user: User,
        services: List[Service],
        token: str = "my-portfolio",
        password: Optional[str] = "share-pass",
        is_active: bool = True,
        expiry_date: Optional[datetime] = None,
    ) -> SharedService:
        link = SharedService(
            user_id=user.id,
            token=token,
            title="포트폴리오",
            password=hash_password(password) if password else None,
            is_active=is_active,
            expiry_date=expiry_date,
            view_count=0,
        )
        link.services = services
        session.add(link)
        await session.commit()
        return link


async def fetch(model, pk):
    """새 세션으로 행을 다시 읽는다 (요청이 바꾼 값을 확인할 때)."""
    async with db_manager.get_session() as session:
        return await session.get(model, pk)
