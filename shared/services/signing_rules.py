"""
서명 토큰 사전 조건 검사 파이프라인.

각 규칙은 SigningContext 를 받아 통과하면 None, 실패하면 SigningRejection 을
돌려준다. first_failure 는 규칙을 순서대로 실행하고 처음 실패한 결과만 반환한다.
"""

import hmac
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from domain.entities.contract import SignerType
from domain.entities.sign_token import SignToken

TOKEN_INVALID = "유효하지 않은 토큰입니다"
TOKEN_EXPIRED = "토큰이 만료되었습니다"
TOKEN_EXPIRED_REQUEST_NEW = "토큰이 만료되었습니다. 새 링크를 요청하세요"
TOKEN_USED = "이미 사용된 토큰입니다"
ALREADY_SIGNED = "이미 서명이 완료되었습니다"
EMAIL_MISMATCH = "계약서에 등록된 이메일과 일치하지 않습니다"
OTP_NOT_SENT = "OTP가 발송되지 않았습니다"
OTP_EXPIRED = "OTP가 만료되었습니다 (5분). 새로 요청해주세요"
OTP_INVALID = "잘못된 OTP입니다"
OTP_REQUIRED = "OTP 검증이 필요합니다"


@dataclass(frozen=True)
class SigningRejection:
    """처음 실패한 규칙의 결과."""
    rule: str
    status_code: int
    message: str


@dataclass
class SigningContext:
    """규칙이 검사하는 값들."""
    sign_token: Optional[SignToken]
    now: datetime
    email: Optional[str] = None
    otp: Optional[str] = None


SigningRule = Callable[[SigningContext], Optional[SigningRejection]]


def token_exists(ctx: SigningContext) -> Optional[SigningRejection]:
    if ctx.sign_token is None:
        return SigningRejection("token_exists", 404, TOKEN_INVALID)
    return None


def token_not_expired(message: str = TOKEN_EXPIRED) -> SigningRule:
    def rule(ctx: SigningContext) -> Optional[SigningRejection]:
        if ctx.now > ctx.sign_token.expires_at:
            return SigningRejection("token_not_expired", 400, message)
        return None
    return rule


def token_not_used(ctx: SigningContext) -> Optional[SigningRejection]:
    if ctx.sign_token.is_used:
        return SigningRejection("token_not_used", 400, TOKEN_USED)
    return None


def client_not_signed(ctx: SigningContext) -> Optional[SigningRejection]:
    if ctx.sign_token.contract.has_signature_from(SignerType.CLIENT):
        return SigningRejection("client_not_signed", 400, ALREADY_SIGNED)
    return None


def email_matches(ctx: SigningContext) -> Optional[SigningRejection]:
    if ctx.email != ctx.sign_token.email:
        return SigningRejection("email_matches", 400, EMAIL_MISMATCH)
    return None


def otp_issued(message: str = OTP_NOT_SENT) -> SigningRule:
    def rule(ctx: SigningContext) -> Optional[SigningRejection]:
        if not ctx.sign_token.otp or not ctx.sign_token.otp_expiry:
            return SigningRejection("otp_issued", 400, message)
        return None
    return rule


def otp_not_expired(ctx: SigningContext) -> Optional[SigningRejection]:
    if ctx.now > ctx.sign_token.otp_expiry:
        return SigningRejection("otp_not_expired", 400, OTP_EXPIRED)
    return None


def otp_matches(ctx: SigningContext) -> Optional[SigningRejection]:
    submitted = (ctx.otp or "").encode("utf-8")
    if not hmac.compare_digest(submitted, ctx.sign_token.otp.encode("utf-8")):
        return SigningRejection("otp_matches", 400, OTP_INVALID)
    return None


# OTP 발송: 존재 → 만료 → 사용 여부 → 갑 서명 여부 → 이메일 일치
SEND_OTP_RULES = (
    token_exists,
    token_not_expired(TOKEN_EXPIRED_REQUEST_NEW),
    token_not_used,
    client_not_signed,
    email_matches,
)

# OTP 검증: 존재 → 만료 → 사용 여부 → OTP 발송 여부 → OTP 만료 → OTP 일치
VERIFY_OTP_RULES = (
    token_exists,
    token_not_expired(),
    token_not_used,
    otp_issued(),
    otp_not_expired,
    otp_matches,
)

# 갑 서명: 존재 → 만료 → 사용 여부 → OTP 검증 진행 여부
SIGN_RULES = (
    token_exists,
    token_not_expired(),
    token_not_used,
    otp_issued(OTP_REQUIRED),
)


def first_failure(rules: Iterable[SigningRule], ctx: SigningContext) -> Optional[SigningRejection]:
    """규칙을 순서대로 실행하고 처음 실패한 결과를 반환한다."""
    for rule in rules:
        rejection = rule(ctx)
        if rejection is not None:
            return rejection
    return None
