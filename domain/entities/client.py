"""고객(갑) 모델."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey

from core.utils.timezone_helper import utc_now
from .base import Base


class Client(Base):
    """계약 상대방 고객."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)
    business_number = Column(String(50), nullable=True)  # 사업자등록번호, 공개 조회에서 제외
    memo = Column(Text, nullable=True)  # 내부 메모, 공개 조회에서 제외
    is_demo = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
