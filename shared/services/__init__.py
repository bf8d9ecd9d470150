"""Shared services package."""

from .exceptions import ServiceError, NotFoundError, ValidationError, UnauthorizedError, ForbiddenError
from .auth_service import AuthService
from .contract_service import ContractService
from .signing_service import SigningService
from .onboarding_service import OnboardingService, DemoDataCleaner
from .share_service import ShareService

__all__ = [
    'ServiceError',
    'NotFoundError',
    'ValidationError',
    'UnauthorizedError',
    'ForbiddenError',
    'AuthService',
    'ContractService',
    'SigningService',
    'OnboardingService',
    'DemoDataCleaner',
    'ShareService'
]
