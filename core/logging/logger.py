"""
ContractDesk 로깅 모듈
구조화된 JSON 로깅을 제공한다
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from core.config.settings import settings


class JSONFormatter(logging.Formatter):
    """로그 레코드를 JSON 한 줄로 출력하는 포매터"""

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 JSON 으로 변환"""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        # 구조화된 컨텍스트 필드
        context = getattr(record, "context", None)
        if context:
            log_entry.update(context)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """사람이 읽기 쉬운 포맷. 컨텍스트는 key=value 로 덧붙인다"""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = getattr(record, "context", None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            return f"{base} | {pairs}"
        return base


class StructuredLogger:
    """추가 컨텍스트를 키워드 인자로 받는 로거"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log_with_context(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """컨텍스트와 함께 메시지를 기록"""
        context = {key: value for key, value in kwargs.items() if value is not None}
        self.logger.log(level, message, exc_info=exc_info, extra={"context": context}, stacklevel=3)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log_with_context(logging.CRITICAL, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """traceback 과 함께 기록"""
        self._log_with_context(logging.ERROR, message, exc_info=True, **kwargs)


def setup_logging() -> None:
    """애플리케이션 로깅 설정"""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.upper())

    # 기존 handler 제거
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            TextFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
    root_logger.addHandler(console_handler)

    # SQL 로그는 database_echo 로만 켠다
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# 기본 로거
logger = StructuredLogger("contractdesk")

# import 시점에 로깅 설정
setup_logging()
