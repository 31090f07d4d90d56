"""
FastAPI 메인 애플리케이션

스크립트 동기화 시스템의 REST API를 제공합니다.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ..config.settings import Settings, get_settings
from ..exceptions import (
    InvalidSourceIdentifierException,
    RateLimitedException,
    ScriptNotFoundException,
    ScriptSyncException,
)
from ..scripts.downloader import ScriptDownloader
from ..utils.logging import get_logger, setup_logging
from .dependencies import get_downloader
from .endpoints.metrics import metrics_router
from .endpoints.scripts import scripts_router
from .endpoints.sync import sync_router
from .models import ErrorResponse, HealthCheckResponse

API_VERSION = "1.0.0"

logger = get_logger(__name__)


def _error_response(status_code: int, exc: ScriptSyncException, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.message,
            detail=detail,
            code=exc.error_code
        ).model_dump(mode="json")
    )


def create_app(settings: Optional[Settings] = None, downloader: Optional[ScriptDownloader] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성

    Args:
        settings: 시스템 설정 (None이면 기본 설정 사용)
        downloader: 미리 만든 스크립트 동기화 인스턴스 (None이면 시작 시 생성)

    Returns:
        FastAPI 애플리케이션
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 생명주기 관리"""
        setup_logging(settings)
        logger.info("API 서버 시작")

        owns_downloader = app.state.downloader is None
        if owns_downloader:
            app.state.downloader = ScriptDownloader(settings)

        try:
            yield
        finally:
            logger.info("API 서버 종료")
            if owns_downloader:
                await app.state.downloader.close()
                app.state.downloader = None

    app = FastAPI(
        title="스크립트 동기화 API",
        description="다중 저장소 스크립트 메타데이터 동기화 및 비교 REST API",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.downloader = downloader

    # GZip 압축 미들웨어
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.include_router(sync_router)
    app.include_router(scripts_router)
    app.include_router(metrics_router)

    @app.exception_handler(ScriptNotFoundException)
    async def script_not_found_handler(request: Request, exc: ScriptNotFoundException):
        """스크립트 없음 핸들러"""
        return _error_response(status.HTTP_404_NOT_FOUND, exc)

    @app.exception_handler(InvalidSourceIdentifierException)
    async def invalid_source_handler(request: Request, exc: InvalidSourceIdentifierException):
        """잘못된 저장소 URL 핸들러"""
        return _error_response(status.HTTP_400_BAD_REQUEST, exc)

    @app.exception_handler(RateLimitedException)
    async def rate_limited_handler(request: Request, exc: RateLimitedException):
        """GitHub 요청 한도 초과 핸들러"""
        return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, exc, detail=exc.hint)

    @app.exception_handler(ScriptSyncException)
    async def script_sync_exception_handler(request: Request, exc: ScriptSyncException):
        """기타 시스템 예외 핸들러"""
        logger.error(f"요청 처리 오류: {exc.message}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """HTTP 예외 핸들러"""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code=str(exc.status_code)
            ).model_dump(mode="json")
        )

    @app.get("/", tags=["Root"])
    async def root():
        """루트 엔드포인트"""
        return {
            "message": "스크립트 동기화 API",
            "version": API_VERSION,
            "status": "running",
            "timestamp": datetime.now().isoformat(),
            "docs_url": "/docs"
        }

    @app.get("/health", response_model=HealthCheckResponse, tags=["Health"])
    async def health_check(downloader: ScriptDownloader = Depends(get_downloader)):
        """
        헬스 체크

        Returns:
            서비스 상태 정보
        """
        components = {
            "store": "operational" if downloader.store.root.is_dir() else "missing",
            "sources": f"{len(downloader.provider.list_enabled())} enabled",
            "backend": settings.source_backend.value,
        }
        overall_status = "healthy" if components["store"] == "operational" else "degraded"

        return HealthCheckResponse(
            status=overall_status,
            timestamp=datetime.now(),
            components=components,
            version=API_VERSION
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "script_sync.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level="info"
    )
