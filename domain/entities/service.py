"""서비스(판매 상품)와 공유 링크 모델."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Table
from sqlalchemy.orm import relationship

from core.utils.timezone_helper import utc_now
from .base import Base


shared_service_services = Table(
    "shared_service_services",
    Base.metadata,
    Column("shared_service_id", Integer, ForeignKey("shared_services.id", ondelete="CASCADE"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
)


class Service(Base):
    """사용자가 판매하는 서비스."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False, default=0)  # 원 단위
    is_demo = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)


class SharedService(Base):
    """비밀번호로 보호할 수 있는 서비스 공유 링크."""

    __tablename__ = "shared_services"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    password = Column(String(255), nullable=True)  # bcrypt 해시
    is_active = Column(Boolean, nullable=False, default=True)
    expiry_date = Column(DateTime, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    services = relationship("Service", secondary=shared_service_services)
