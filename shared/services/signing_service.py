"""전자서명 흐름: 서명 토큰 발급, OTP 발송/검증, 서명 기록."""

import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config.settings import settings
from core.logging.logger import logger
from core.utils.timezone_helper import utc_now
from domain.entities.contract import Contract, Signature, SignerType
from domain.entities.sign_token import SignToken
from shared.services.contract_service import CONTRACT_NOT_FOUND, ContractService
from shared.services.exceptions import NotFoundError, ServiceError, ValidationError
from shared.services.signing_rules import (
    ALREADY_SIGNED,
    SEND_OTP_RULES,
    SIGN_RULES,
    TOKEN_INVALID,
    VERIFY_OTP_RULES,
    SigningContext,
    SigningRule,
    first_failure,
)


def generate_otp() -> str:
    """6자리 숫자 OTP."""
    return f"{secrets.randbelow(1000000):06d}"


def generate_sign_token_value() -> str:
    """서명 링크용 토큰 (64자 hex)."""
    return secrets.token_hex(32)


class SigningService:
    """서명 토큰의 수명 주기를 관리한다."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load_token(self, token: Optional[str], lock: bool = False) -> Optional[SignToken]:
        """토큰과 계약서(고객, 조항, 서명)를 함께 읽는다.

        lock=True 이면 트랜잭션 끝까지 토큰 행을 잠근다 (지원하는 DB 에서만).
        """
        if not token:
            return None
        query = (
            select(SignToken)
            .where(SignToken.token == token)
            .options(
                selectinload(SignToken.contract).selectinload(Contract.client),
                selectinload(SignToken.contract).selectinload(Contract.clauses),
                selectinload(SignToken.contract).selectinload(Contract.signatures),
            )
        )
        if lock:
            query = query.with_for_update(of=SignToken)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def _check(
        self,
        rules: Iterable[SigningRule],
        sign_token: Optional[SignToken],
        now: datetime,
        **context: Any,
    ) -> None:
        rejection = first_failure(rules, SigningContext(sign_token=sign_token, now=now, **context))
        if rejection is not None:
            logger.info(
                "Signing precondition failed",
                rule=rejection.rule,
                sign_token_id=sign_token.id if sign_token else None,
            )
            # 잠금 해제, 토큰은 변경하지 않는다
            await self.session.rollback()
            raise ServiceError(rejection.status_code, rejection.message)

    async def issue_otp(self, token: Optional[str], email: Optional[str]) -> SignToken:
        """서명 토큰을 검증하고 OTP 를 발급해 토큰에 저장한다."""
        sign_token = await self._load_token(token, lock=True)
        now = utc_now()
        await self._check(SEND_OTP_RULES, sign_token, now, email=email)

        sign_token.otp = generate_otp()
        sign_token.otp_expiry = now + timedelta(minutes=settings.otp_ttl_minutes)
        await self.session.commit()

        logger.info(
            "OTP issued",
            sign_token_id=sign_token.id,
            contract_id=sign_token.contract_id,
            otp_expiry=sign_token.otp_expiry.isoformat(),
        )
        return sign_token

    async def verify_otp(self, token: Optional[str], otp: Optional[str]) -> SignToken:
        """OTP 를 검증한다. 토큰 상태는 바꾸지 않는다."""
        sign_token = await self._load_token(token)
        await self._check(VERIFY_OTP_RULES, sign_token, utc_now(), otp=otp)
        logger.info("OTP verified", sign_token_id=sign_token.id, contract_id=sign_token.contract_id)
        return sign_token

    async def generate_sign_token(self, contract_id: int, user_id: int, origin: Optional[str] = None) -> Dict[str, Any]:
        """갑 서명 링크를 만든다. 을이 먼저 서명해야 한다."""
        result = await self.session.execute(
            select(Contract)
            .where(Contract.id == contract_id, Contract.user_id == user_id)
            .options(selectinload(Contract.client), selectinload(Contract.signatures))
        )
        contract = result.scalar_one_or_none()
        if not contract:
            raise NotFoundError(CONTRACT_NOT_FOUND)

        if not contract.has_signature_from(SignerType.FREELANCER):
            raise ValidationError("을(수행자)이 먼저 서명해야 갑 서명 링크를 생성할 수 있습니다")
        if contract.has_signature_from(SignerType.CLIENT):
            raise ValidationError("갑이 이미 서명을 완료했습니다")

        client_email = contract.client.email if contract.client else None
        if not client_email:
            raise ValidationError("갑의 이메일 정보가 없습니다")

        # 기존 갑용 토큰 무효화
        await self.session.execute(
            update(SignToken)
            .where(
                SignToken.contract_id == contract_id,
                SignToken.signer_type == SignerType.CLIENT,
                SignToken.is_used.is_(False),
            )
            .values(is_used=True)
        )

        sign_token = SignToken(
            contract_id=contract_id,
            token=generate_sign_token_value(),
            signer_type=SignerType.CLIENT,
            email=client_email,
            expires_at=utc_now() + timedelta(hours=settings.sign_token_ttl_hours),
        )
        self.session.add(sign_token)
        await self.session.commit()

        base_url = (origin or settings.public_base_url).rstrip("/")
        logger.info("Sign token generated", contract_id=contract_id, sign_token_id=sign_token.id)
        return {
            "success": True,
            "signLink": f"{base_url}/contracts/sign/{contract_id}?token={sign_token.token}",
            "expiresAt": sign_token.expires_at,
            "clientEmail": client_email,
        }

    async def sign_contract(self, contract_id: int, data: Dict[str, Any]) -> Contract:
        """서명을 기록한다. 갑 서명이 토큰과 함께 오면 토큰을 즉시 사용 처리한다."""
        signer_type = data.get("signer_type")
        token = data.get("token")
        sign_token = None

        if signer_type == SignerType.CLIENT and token:
            sign_token = await self._load_token(token, lock=True)
            await self._check(SIGN_RULES, sign_token, utc_now())
            if sign_token.contract_id != contract_id:
                logger.warning(
                    "Sign token belongs to another contract",
                    sign_token_id=sign_token.id,
                    contract_id=contract_id,
                )
                await self.session.rollback()
                raise ServiceError(404, TOKEN_INVALID)

        result = await self.session.execute(
            select(Contract)
            .where(Contract.id == contract_id)
            .options(selectinload(Contract.signatures))
        )
        contract = result.scalar_one_or_none()
        if not contract:
            raise NotFoundError(CONTRACT_NOT_FOUND)

        if contract.has_signature_from(signer_type):
            raise ValidationError(ALREADY_SIGNED)

        signature = Signature(
            contract_id=contract_id,
            signer_type=signer_type,
            signer_name=data.get("signer_name") or "서명자",
            signer_email=data.get("signer_email") or "",
            signature_data=data.get("signature_data"),
            signature_type=data.get("signature_type") or "canvas",
        )
        self.session.add(signature)

        if sign_token is not None:
            sign_token.is_used = True

        await self.session.commit()

        logger.info("Signature recorded", contract_id=contract_id, signer_type=signer_type)
        if sign_token is not None:
            logger.info("Sign token invalidated after client signature", sign_token_id=sign_token.id)

        return await ContractService(self.session).get_contract(contract_id, include_quote=False, refresh=True)
