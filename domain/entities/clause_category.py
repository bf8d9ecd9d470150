"""조항 카테고리 (시드 대상 기준 데이터)."""

from sqlalchemy import Column, Integer, String, Boolean, Text

from .base import Base


class ClauseCategory(Base):
    """계약 유형별 조항 카테고리."""

    __tablename__ = "clause_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    level = Column(Integer, nullable=False, default=1)
    is_default = Column(Boolean, nullable=False, default=False)
