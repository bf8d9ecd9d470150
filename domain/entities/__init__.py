"""
ContractDesk 도메인 엔티티
"""

# 관계 해석을 위해 모든 모델을 import 한다
from .base import Base
from .user import User, UserRole
from .client import Client
from .service import Service, SharedService, shared_service_services
from .quote import Quote
from .contract import Contract, Clause, Signature, SignerType
from .sign_token import SignToken
from .clause_category import ClauseCategory

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Client",
    "Service",
    "SharedService",
    "shared_service_services",
    "Quote",
    "Contract",
    "Clause",
    "Signature",
    "SignerType",
    "SignToken",
    "ClauseCategory",
]
