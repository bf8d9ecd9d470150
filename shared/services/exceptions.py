"""서비스 계층의 예상 가능한 실패."""

from typing import Any, Optional


class ServiceError(Exception):
    """HTTP 상태 코드와 사용자 메시지를 가진 서비스 오류.

    라우터는 이 예외를 {"error": message} 응답으로 변환한다.
    """

    def __init__(self, status_code: int, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NotFoundError(ServiceError):
    def __init__(self, message: str):
        super().__init__(404, message)


class ValidationError(ServiceError):
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(400, message, details)


class UnauthorizedError(ServiceError):
    def __init__(self, message: str = "인증이 필요합니다"):
        super().__init__(401, message)


class ForbiddenError(ServiceError):
    def __init__(self, message: str):
        super().__init__(403, message)
