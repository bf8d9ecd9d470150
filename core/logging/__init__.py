"""
ContractDesk 로깅 모듈
"""

from .logger import logger, StructuredLogger, JSONFormatter, TextFormatter, setup_logging

__all__ = ["logger", "StructuredLogger", "JSONFormatter", "TextFormatter", "setup_logging"]
