"""FastAPI 앱 팩토리"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webcalc.api import health_router, search_router, tool_router
from webcalc.core.config import settings
from webcalc.core.logging import logger
from webcalc.crawlers.http_client import shutdown_shared_http_client
from webcalc.crawlers.playwright import get_shared_browser_handle


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기

    앱이 공유 브라우저 핸들의 소유자 하나로 등록되고, 종료 시 반납합니다.
    """
    logger.info("Starting application...")
    browser = get_shared_browser_handle().retain()
    logger.info("Application started")
    yield
    logger.info("Shutting down application...")
    try:
        await browser.release()
    except Exception as e:
        logger.warning(f"Browser shutdown failed: {type(e).__name__}: {e}")
    try:
        await shutdown_shared_http_client()
    except Exception as e:
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
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(tool_router)

    return app


# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
