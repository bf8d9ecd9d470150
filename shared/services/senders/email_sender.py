"""ContractDesk 이메일 발송 (SMTP)."""

import asyncio
import html
import smtplib
import ssl
from typing import Optional
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from core.logging.logger import logger
from core.config.settings import settings


class EmailSender:
    """SMTP 이메일 발송기."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_from_email: Optional[str] = None,
        smtp_from_name: Optional[str] = None
    ):
        """
        발송기 초기화. 인자를 생략하면 settings 값을 쓴다.

        Args:
            smtp_host: SMTP 호스트
            smtp_port: SMTP 포트
            smtp_user: SMTP 사용자
            smtp_password: SMTP 비밀번호
            smtp_from_email: 보내는 사람 이메일
            smtp_from_name: 보내는 사람 이름
        """
        self.smtp_host = smtp_host or settings.smtp_host
        self.smtp_port = smtp_port or settings.smtp_port
        self.smtp_user = smtp_user or settings.smtp_user
        self.smtp_password = smtp_password or settings.smtp_password
        self.smtp_from_email = smtp_from_email or settings.smtp_from_email or self.smtp_user
        self.smtp_from_name = smtp_from_name or settings.smtp_from_name
        self.smtp_use_tls = settings.smtp_use_tls
        self.smtp_use_ssl = settings.smtp_use_ssl
        self.smtp_timeout = settings.smtp_timeout

    def is_configured(self) -> bool:
        return all([self.smtp_host, self.smtp_user, self.smtp_password, self.smtp_from_email])

    async def send(self, to_email: str, subject: str, html_content: str, plain_text: str) -> bool:
        """
        이메일 발송.

        Returns:
            발송 성공 여부. 설정이 없거나 SMTP 오류면 False.
        """
        if not self.is_configured():
            logger.warning("Email sender is not configured, message skipped", to_email=to_email)
            return False

        message = self._create_message(to_email, subject, html_content, plain_text)
        try:
            await asyncio.to_thread(self._send_message, to_email, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}", to_email=to_email)
            return False

        logger.info("Email sent", to_email=to_email, subject=subject)
        return True

    def _create_message(self, to_email: str, subject: str, html_content: str, plain_text: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.smtp_from_name} <{self.smtp_from_email}>"
        message["To"] = to_email
        message.attach(MIMEText(plain_text, "plain", "utf-8"))
        message.attach(MIMEText(html_content, "html", "utf-8"))
        return message

    def _send_message(self, to_email: str, message: MIMEMultipart) -> None:
        if self.smtp_use_ssl:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout, context=context)
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout)

        try:
            if self.smtp_use_tls and not self.smtp_use_ssl:
                server.starttls(context=ssl.create_default_context())
            server.login(self.smtp_user, self.smtp_password)
            server.sendmail(self.smtp_from_email, [to_email], message.as_string())
        finally:
            server.quit()


class OtpEmailSender:
    """서명용 OTP 메일."""

    def __init__(self, sender: Optional[EmailSender] = None):
        self.sender = sender or EmailSender()

    async def send_otp(self, to_email: str, otp: str, contract_title: str) -> bool:
        minutes = settings.otp_ttl_minutes
        subject = f"[{settings.app_name}] 전자서명 인증번호"
        plain_text = (
            f"'{contract_title}' 계약서 서명을 위한 인증번호는 {otp} 입니다.\n"
            f"인증번호는 {minutes}분 동안 유효합니다."
        )
        html_content = (
            f"<p><strong>{html.escape(contract_title)}</strong> 계약서 서명을 위한 인증번호입니다.</p>"
            f"<h2>{otp}</h2>"
            f"<p>인증번호는 {minutes}분 동안 유효합니다.</p>"
        )
        return await self.sender.send(to_email, subject, html_content, plain_text)
