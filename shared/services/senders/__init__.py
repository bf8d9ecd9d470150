"""알림 발송기."""

from .email_sender import EmailSender, OtpEmailSender

__all__ = [
    "EmailSender",
    "OtpEmailSender"
]
