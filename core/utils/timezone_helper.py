"""시간 관련 유틸리티."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """현재 UTC 시각 (naive). DB 의 모든 타임스탬프는 naive UTC 로 저장한다."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """aware datetime 을 naive UTC 로 변환한다. naive 값은 UTC 로 간주한다."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
