"""
ContractDesk API 용 Pydantic 스키마

JSON 키는 camelCase, 파이썬 속성은 snake_case 를 쓴다.
"""
from datetime import datetime
from typing import Any, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭을 쓰는 기본 스키마."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def serialize(schema: Type[BaseModel], obj: Any) -> dict:
    """ORM 객체를 JSON 응답용 dict 로 변환."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------- 응답 스키마

class ServiceResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    price: int


class QuoteResponse(CamelModel):
    id: int
    client_id: Optional[int] = None
    service_id: Optional[int] = None
    title: str
    amount: int
    status: str
    created_at: datetime
    service: Optional[ServiceResponse] = None


class PublicClientResponse(CamelModel):
    """공개 조회용 고객 정보 (사업자등록번호, 메모 제외)."""
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None


class ClientResponse(PublicClientResponse):
    business_number: Optional[str] = None
    memo: Optional[str] = None
    created_at: datetime


class ClauseResponse(CamelModel):
    id: int
    type: str
    title: str
    content: str
    order: int


class SignatureResponse(CamelModel):
    id: int
    signer_type: str
    signer_name: str
    signer_email: str
    signature_data: Optional[str] = None
    signature_type: str
    signed_at: datetime


class PublicContractResponse(CamelModel):
    """공개 계약서 보기. userId 와 견적서는 포함하지 않는다."""
    id: int
    client_id: Optional[int] = None
    title: str
    amount: int
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    client: Optional[PublicClientResponse] = None
    clauses: List[ClauseResponse] = []
    signatures: List[SignatureResponse] = []


class ContractResponse(CamelModel):
    """계약서 집합 전체."""
    id: int
    user_id: int
    client_id: Optional[int] = None
    quote_id: Optional[int] = None
    title: str
    amount: int
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    client: Optional[ClientResponse] = None
    quote: Optional[QuoteResponse] = None
    clauses: List[ClauseResponse] = []
    signatures: List[SignatureResponse] = []


class UserResponse(CamelModel):
    id: int
    username: Optional[str] = None
    email: str
    name: Optional[str] = None
    role: str
    onboarding_completed: bool


# ---------------------------------------------------------------- 요청 스키마

class ClauseInput(CamelModel):
    """조항 입력. type/title 은 비어 있으면 서비스에서 기본값을 채운다."""
    type: Optional[str] = None
    title: Optional[str] = None
    content: str


class ClientInput(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None


class ContractUpdateRequest(CamelModel):
    title: Optional[str] = None
    amount: Optional[int] = Field(None, ge=0)
    clauses: Optional[List[ClauseInput]] = None


class ContractCreateRequest(CamelModel):
    title: Optional[str] = None
    quote_id: Optional[int] = None
    client_id: Optional[int] = None
    client: Optional[ClientInput] = None
    amount: Optional[int] = Field(None, ge=0)
    clauses: List[ClauseInput] = []


class SendOtpRequest(CamelModel):
    token: Optional[str] = None
    email: Optional[str] = None


class VerifyOtpRequest(CamelModel):
    token: Optional[str] = None
    otp: Optional[str] = None


class SignRequest(CamelModel):
    signer_type: Literal["client", "freelancer"]
    signature_data: Optional[str] = None
    signature_type: Optional[str] = None
    signer_name: Optional[str] = None
    signer_email: Optional[str] = None
    token: Optional[str] = None


class OnboardingCompleteRequest(CamelModel):
    completed: Optional[bool] = True
    completed_at: Optional[datetime] = None


class ShareVerifyRequest(CamelModel):
    token: Optional[str] = None
    password: Optional[str] = None


class ShareCreateRequest(CamelModel):
    selected_services: List[int] = []
    title: Optional[str] = None
    description: Optional[str] = None
    expiry_date: Optional[datetime] = None
    password: Optional[str] = None
    custom_slug: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", "username")
    @classmethod
    def strip_login(cls, v: Optional[str]) -> Optional[str]:
        """앞뒤 공백 제거."""
        return v.strip() if v else v
