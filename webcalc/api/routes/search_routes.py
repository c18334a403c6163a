"""Search Routes - HTTP → SearchOrchestrator 위임

HTTP Layer는 요청 검증과 응답 변환만 담당합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from webcalc.api.errors import error_payload, to_http_exception
from webcalc.core.exceptions import WebCalcException
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.engine import SearchOrchestrator
from webcalc.schemas.tool_schema import SearchData, SearchRequest, SearchResponse

router = APIRouter(prefix="/api/v1", tags=["search"])

# 싱글톤
_orchestrator: Optional[SearchOrchestrator] = None


def get_orchestrator() -> SearchOrchestrator:
    """SearchOrchestrator 싱글톤 (기본 엔진: DDG HTML + Bing/Playwright)"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SearchOrchestrator()
    return _orchestrator


@router.post("/search", response_model=SearchResponse)
async def search_web(
    request: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """웹 검색 (search_web)

    Flow:
        1. 요청 검증 (pydantic)
        2. Orchestrator에 위임 (Fast → 승격 판단 → Deep)
        3. SearchReport를 응답으로 변환
    """
    logger.info(f"[API] Search request: q='{sanitize_for_log(request.q)}', mode={request.mode}")

    try:
        report = await orchestrator.perform_search(
            request.q,
            mode=request.mode,
            limit=request.limit,
            language=request.lang,
        )
    except WebCalcException as e:
        logger.warning(f"[API] Search failed: {e}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"[API] Search crashed: q='{sanitize_for_log(request.q)}'", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_payload("INTERNAL_ERROR", f"{type(e).__name__}: {e}"),
        ) from e

    return SearchResponse(status="success", data=SearchData.model_validate(report.to_dict()))
