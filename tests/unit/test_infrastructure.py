"""Unit 테스트: 로깅, 설정, 공유 링크 상태, 이메일 발송, 온보딩 서비스."""

import json
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from core.config.settings import Settings
from core.logging.logger import JSONFormatter, StructuredLogger, TextFormatter
from core.utils.timezone_helper import to_naive_utc
from domain.entities.service import SharedService
from domain.entities.user import User
from shared.services.onboarding_service import OnboardingService
from shared.services.senders.email_sender import EmailSender, OtpEmailSender
from shared.services.share_service import is_link_active

NOW = datetime(2026, 3, 1, 12, 0, 0)


def make_record(message="hello", context=None):
    record = logging.LogRecord("contractdesk", logging.INFO, __file__, 10, message, None, None)
    if context is not None:
        record.context = context
    return record


class TestLogging:

    def test_json_formatter_merges_context(self):
        output = json.loads(JSONFormatter().format(make_record(context={"contract_id": 7, "note": "계약"})))

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["contract_id"] == 7
        assert output["note"] == "계약"

    def test_text_formatter_appends_pairs(self):
        output = TextFormatter("%(message)s").format(make_record(context={"user_id": 3}))

        assert output == "hello | user_id=3"

    def test_structured_logger_passes_context(self, caplog):
        structured = StructuredLogger("contractdesk.test")

        with caplog.at_level(logging.INFO, logger="contractdesk.test"):
            structured.info("OTP issued", sign_token_id=3, skipped=None)

        record = caplog.records[-1]
        assert record.getMessage() == "OTP issued"
        assert record.context == {"sign_token_id": 3}


class TestSettings:

    def test_async_database_url(self):
        config = Settings(database_url="postgresql://u:p@db:5432/contracts")

        assert config.async_database_url == "postgresql+asyncpg://u:p@db:5432/contracts"

    def test_production_flag(self):
        assert Settings(environment="production").is_production
        assert not Settings(environment="test").is_production


class TestTimezone:

    def test_aware_converted_to_naive_utc(self):
        value = datetime(2026, 3, 1, 21, 0, tzinfo=timezone(timedelta(hours=9)))

        assert to_naive_utc(value) == datetime(2026, 3, 1, 12, 0)

    def test_naive_and_none_unchanged(self):
        assert to_naive_utc(NOW) == NOW
        assert to_naive_utc(None) is None


class TestShareLinkState:

    def test_active_without_expiry(self):
        assert is_link_active(SharedService(is_active=True, expiry_date=None), NOW)

    def test_inactive(self):
        assert not is_link_active(SharedService(is_active=False, expiry_date=None), NOW)

    def test_expired(self):
        link = SharedService(is_active=True, expiry_date=NOW - timedelta(seconds=1))

        assert not is_link_active(link, NOW)


class TestEmailSender:

    @pytest.mark.asyncio
    async def test_unconfigured_sender_skips(self):
        sender = EmailSender(smtp_host="smtp.example.com", smtp_user="", smtp_password="")
        sender.smtp_user = None

        assert sender.is_configured() is False
        assert await sender.send("a@example.com", "subject", "<p>x</p>", "x") is False

    @pytest.mark.asyncio
    async def test_otp_message(self):
        sender = AsyncMock(spec=EmailSender)
        sender.send.return_value = True

        assert await OtpEmailSender(sender).send_otp("client@example.com", "123456", "웹사이트 계약서") is True

        to_email, subject, html_content, plain_text = sender.send.call_args.args
        assert to_email == "client@example.com"
        assert "123456" in plain_text
        assert "123456" in html_content
        assert "웹사이트 계약서" in plain_text

    @pytest.mark.asyncio
    async def test_otp_message_escapes_title(self):
        sender = AsyncMock(spec=EmailSender)
        sender.send.return_value = True

        await OtpEmailSender(sender).send_otp("client@example.com", "123456", "<script>alert(1)</script>")

        html_content = sender.send.call_args.args[2]
        assert "<script>" not in html_content
        assert "&lt;script&gt;" in html_content

    def test_message_has_both_parts(self):
        sender = EmailSender(
            smtp_host="smtp.example.com",
            smtp_user="bot@example.com",
            smtp_password="pw",
            smtp_from_email="bot@example.com",
            smtp_from_name="ContractDesk",
        )

        message = sender._create_message("client@example.com", "제목", "<b>본문</b>", "본문")

        assert message["To"] == "client@example.com"
        assert [part.get_content_type() for part in message.get_payload()] == ["text/plain", "text/html"]


class TestOnboardingService:

    @pytest.mark.asyncio
    async def test_complete_sets_flag_and_time(self, mock_db_session):
        user = User(id=5, email="owner@example.com", onboarding_completed=False)
        completed_at = datetime(2026, 1, 2, 12, 0, tzinfo=timezone(timedelta(hours=9)))

        result = await OnboardingService(mock_db_session).complete(user, completed_at)

        assert result.onboarding_completed is True
        assert result.onboarding_completed_at == datetime(2026, 1, 2, 3, 0)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_complete_defaults_to_now(self, mock_db_session):
        user = User(id=5, email="owner@example.com", onboarding_completed=False)

        await OnboardingService(mock_db_session).complete(user)

        assert user.onboarding_completed_at is not None
