"""FastAPI 앱 팩토리"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.api import health_router, logo_router
from logo_cdn.providers import shutdown_shared_http_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info("Starting application...")
    logger.info(f"Provider order: {settings.providers}")
    yield
    logger.info("Shutting down application...")
    try:
        await shutdown_shared_http_client()
    except Exception as e:
        # 종료 훅 예외가 앱 종료를 막지 않도록 로그만 남김
        logger.warning(f"HTTP client shutdown failed: {type(e).__name__}: {e}")


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(logo_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
