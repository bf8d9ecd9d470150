"""사용자 모델."""

from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from core.utils.timezone_helper import utc_now
from .base import Base


class UserRole(str, Enum):
    """사용자 역할."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """서비스 사용자 (계약서 작성자, 을)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=True)  # bcrypt 해시
    name = Column(String(255), nullable=True)
    role = Column(String(50), nullable=False, default=UserRole.USER.value)
    email_verified_at = Column(DateTime, nullable=True)

    # 온보딩
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    onboarding_completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)

    contracts = relationship("Contract", back_populates="owner", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
