"""
ContractDesk FastAPI 애플리케이션
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid

from core.config.settings import settings
from core.database.session import close_database, init_database
from core.logging.logger import logger
from shared.services.exceptions import ServiceError
from .main import api_router

HTTP_ERROR_MESSAGES = {
    401: "인증이 필요합니다",
    404: "요청한 경로를 찾을 수 없습니다",
    405: "허용되지 않는 메서드입니다",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """시작 시 연결 풀 생성, 종료 시 정리."""
    await init_database()
    logger.info("Application started", environment=settings.environment, version=settings.version)
    yield
    await close_database()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """FastAPI 애플리케이션 생성."""
    app = FastAPI(
        title=settings.app_name,
        description="계약서 관리와 전자서명 API",
        version=settings.version,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """모든 HTTP 요청 로깅."""
        request_id = str(uuid.uuid4())
        start_time = time.time()

        logger.info(
            "HTTP Request started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "HTTP Request failed",
                request_id=request_id,
                error=str(e),
                process_time=process_time
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "HTTP Request completed",
            request_id=request_id,
            status_code=response.status_code,
            process_time=process_time
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """서비스 계층 오류 (의존성에서 발생한 401 등)."""
        logger.info("Service error", status_code=exc.status_code, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """HTTP 예외를 {"error": ...} 형식으로 변환."""
        logger.warning(
            "HTTP Exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path
        )
        message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """요청 본문 검증 실패는 400."""
        fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        logger.warning("Validation Error", fields=fields, path=request.url.path)
        return JSONResponse(
            status_code=400,
            content={"error": "요청 데이터가 올바르지 않습니다", "details": fields},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """처리되지 않은 예외."""
        logger.exception(f"Unhandled exception: {exc}", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": "서버 오류가 발생했습니다"})

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """애플리케이션 상태 확인."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.version
        }

    return app


app = create_app()
