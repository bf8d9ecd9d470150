"""Unit 테스트: 서명 토큰 사전 조건 파이프라인."""

from datetime import datetime, timedelta

import pytest

from domain.entities.contract import Contract, Signature, SignerType
from domain.entities.sign_token import SignToken
from shared.services.signing_rules import (
    SEND_OTP_RULES,
    SIGN_RULES,
    VERIFY_OTP_RULES,
    SigningContext,
    first_failure,
)
from shared.services.signing_service import generate_otp, generate_sign_token_value

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def contract():
    return Contract(id=1, title="계약서")


@pytest.fixture
def sign_token(contract):
    token = SignToken(
        id=10,
        token="t" * 64,
        email="client@example.com",
        expires_at=NOW + timedelta(hours=1),
        is_used=False,
        otp=None,
        otp_expiry=None,
    )
    token.contract = contract
    return token


def ctx(sign_token, **kwargs):
    return SigningContext(sign_token=sign_token, now=NOW, **kwargs)


class TestSendOtpRules:

    def test_all_checks_pass(self, sign_token):
        assert first_failure(SEND_OTP_RULES, ctx(sign_token, email="client@example.com")) is None

    def test_missing_token(self):
        rejection = first_failure(SEND_OTP_RULES, ctx(None, email="client@example.com"))

        assert rejection.rule == "token_exists"
        assert rejection.status_code == 404

    def test_expiry_checked_before_email(self, sign_token):
        sign_token.expires_at = NOW - timedelta(seconds=1)

        rejection = first_failure(SEND_OTP_RULES, ctx(sign_token, email="wrong@example.com"))

        assert rejection.rule == "token_not_expired"
        assert rejection.message == "토큰이 만료되었습니다. 새 링크를 요청하세요"

    def test_used_checked_before_signature(self, sign_token, contract):
        sign_token.is_used = True
        contract.signatures.append(Signature(signer_type=SignerType.CLIENT))

        rejection = first_failure(SEND_OTP_RULES, ctx(sign_token, email="client@example.com"))

        assert rejection.rule == "token_not_used"

    def test_client_signature_checked_before_email(self, sign_token, contract):
        contract.signatures.append(Signature(signer_type=SignerType.CLIENT))

        rejection = first_failure(SEND_OTP_RULES, ctx(sign_token, email="wrong@example.com"))

        assert rejection.rule == "client_not_signed"
        assert rejection.message == "이미 서명이 완료되었습니다"

    def test_freelancer_signature_does_not_block(self, sign_token, contract):
        contract.signatures.append(Signature(signer_type=SignerType.FREELANCER))

        assert first_failure(SEND_OTP_RULES, ctx(sign_token, email="client@example.com")) is None

    def test_email_mismatch(self, sign_token):
        rejection = first_failure(SEND_OTP_RULES, ctx(sign_token, email="wrong@example.com"))

        assert rejection.rule == "email_matches"
        assert rejection.status_code == 400


class TestVerifyOtpRules:

    def test_otp_not_issued(self, sign_token):
        rejection = first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp="123456"))

        assert rejection.message == "OTP가 발송되지 않았습니다"

    def test_otp_expired(self, sign_token):
        sign_token.otp = "123456"
        sign_token.otp_expiry = NOW - timedelta(minutes=1)

        rejection = first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp="123456"))

        assert rejection.rule == "otp_not_expired"

    def test_otp_mismatch(self, sign_token):
        sign_token.otp = "123456"
        sign_token.otp_expiry = NOW + timedelta(minutes=5)

        assert first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp="000000")).rule == "otp_matches"
        assert first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp=None)).rule == "otp_matches"
        assert first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp="123456")) is None

    def test_expired_token_message(self, sign_token):
        sign_token.expires_at = NOW - timedelta(minutes=1)

        rejection = first_failure(VERIFY_OTP_RULES, ctx(sign_token, otp="123456"))

        assert rejection.message == "토큰이 만료되었습니다"


class TestSignRules:

    def test_requires_otp(self, sign_token):
        rejection = first_failure(SIGN_RULES, ctx(sign_token))

        assert rejection.message == "OTP 검증이 필요합니다"

    def test_passes_with_otp(self, sign_token):
        sign_token.otp = "123456"
        sign_token.otp_expiry = NOW + timedelta(minutes=5)

        assert first_failure(SIGN_RULES, ctx(sign_token)) is None


class TestGenerators:

    def test_otp_is_six_digits(self):
        for _ in range(50):
            otp = generate_otp()
            assert len(otp) == 6
            assert otp.isdigit()

    def test_sign_token_is_64_hex(self):
        value = generate_sign_token_value()

        assert len(value) == 64
        int(value, 16)
