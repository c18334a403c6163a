"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter

from webcalc import __version__
from webcalc.crawlers.playwright import get_shared_browser_handle
from webcalc.schemas.tool_schema import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    헬스 체크 엔드포인트

    브라우저는 첫 Deep 검색 때 지연 실행되므로 꺼져 있어도 정상입니다.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__,
        browser_running=get_shared_browser_handle().is_running,
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "webcalc 검색/계산 도구",
        "version": __version__,
        "docs": "/docs",
    }
