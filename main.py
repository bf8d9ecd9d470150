#!/usr/bin/env python3
"""
ContractDesk API 서버 실행
"""

import uvicorn

from core.config.settings import settings
from core.logging.logger import logger


def main():
    """uvicorn 으로 API 서버 실행."""
    logger.info(
        "Starting API server",
        host=settings.api_host,
        port=settings.api_port,
        environment=settings.environment,
    )
    uvicorn.run(
        "apps.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
