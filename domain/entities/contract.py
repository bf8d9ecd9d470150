"""계약서 모델."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from core.utils.timezone_helper import utc_now
from .base import Base


class SignerType:
    """서명자 유형."""
    CLIENT = "client"  # 갑
    FREELANCER = "freelancer"  # 을


class Contract(Base):
    """계약서 (고객, 견적서, 조항, 서명을 묶는 집합)."""

    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=True)

    title = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=False, default=0)  # 원 단위
    status = Column(String(50), nullable=False, default="draft")
    is_demo = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=True, onupdate=utc_now)

    owner = relationship("User", back_populates="contracts")
    client = relationship("Client")
    quote = relationship("Quote")
    clauses = relationship(
        "Clause",
        back_populates="contract",
        order_by="Clause.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    signatures = relationship(
        "Signature",
        back_populates="contract",
        order_by="Signature.signed_at.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sign_tokens = relationship(
        "SignToken",
        back_populates="contract",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def has_signature_from(self, signer_type: str) -> bool:
        """해당 유형의 서명이 이미 있는지."""
        return any(signature.signer_type == signer_type for signature in self.signatures)


class Clause(Base):
    """계약 조항. order 가 렌더링 순서를 정한다."""

    __tablename__ = "clauses"
    __table_args__ = (
        UniqueConstraint("contract_id", "order", name="uq_clauses_contract_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, default="custom")
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)

    contract = relationship("Contract", back_populates="clauses")


class Signature(Base):
    """계약서 서명."""

    __tablename__ = "signatures"

    id = Column(Integer, primary_key=True, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    signer_type = Column(String(20), nullable=False)
    signer_name = Column(String(255), nullable=False, default="서명자")
    signer_email = Column(String(255), nullable=False, default="")
    signature_data = Column(Text, nullable=True)
    signature_type = Column(String(20), nullable=False, default="canvas")
    signed_at = Column(DateTime, nullable=False, default=utc_now)

    contract = relationship("Contract", back_populates="signatures")
