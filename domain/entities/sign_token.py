"""전자서명 토큰 모델."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.utils.timezone_helper import utc_now
from .base import Base


class SignToken(Base):
    """이메일과 계약서를 묶는 1회용 서명 토큰.

    수명: 발급 → OTP 설정 → (OTP 검증) → 사용됨.
    is_used 가 True 가 되거나 expires_at 이 지나면 더 이상 쓸 수 없다.
    """

    __tablename__ = "sign_tokens"

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    signer_type = Column(String(20), nullable=False, default="client")
    email = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    otp = Column(String(6), nullable=True)
    otp_expiry = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    contract = relationship("Contract", back_populates="sign_tokens")
