"""견적서 모델."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.utils.timezone_helper import utc_now
from .base import Base


class Quote(Base):
    """계약서로 전환할 수 있는 견적서."""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    title = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    status = Column(String(50), nullable=False, default="draft")
    is_demo = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    client = relationship("Client")
    service = relationship("Service")
