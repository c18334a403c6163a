"""Tool Routes - 페이지 추출/요약, 수식 계산, 위키 요약"""

from typing import Optional

from fastapi import APIRouter, Depends

from webcalc.api.errors import to_http_exception
from webcalc.core.exceptions import WebCalcException
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.schemas.tool_schema import (
    DocumentData,
    FetchRequest,
    FetchResponse,
    MathData,
    MathRequest,
    MathResponse,
    SummarizeRequest,
    SummarizeResponse,
    SummaryData,
    WikiData,
    WikiRequest,
    WikiResponse,
)
from webcalc.services import ExtractService, WikipediaService, evaluate_expression

router = APIRouter(prefix="/api/v1", tags=["tools"])

# 싱글톤 서비스
_extract_service: Optional[ExtractService] = None
_wikipedia_service: Optional[WikipediaService] = None


def get_extract_service() -> ExtractService:
    global _extract_service
    if _extract_service is None:
        _extract_service = ExtractService()
    return _extract_service


def get_wikipedia_service() -> WikipediaService:
    global _wikipedia_service
    if _wikipedia_service is None:
        _wikipedia_service = WikipediaService()
    return _wikipedia_service


@router.post("/fetch", response_model=FetchResponse)
async def fetch_url(
    request: FetchRequest,
    service: ExtractService = Depends(get_extract_service),
):
    """URL 본문 추출 (HTML/PDF)"""
    logger.info(f"[API] Fetch request: url='{sanitize_for_log(request.url)}'")
    try:
        doc = await service.fetch_and_extract(request.url, request.lang)
    except WebCalcException as e:
        logger.warning(f"[API] Fetch failed: {e}")
        raise to_http_exception(e) from e
    return FetchResponse(data=DocumentData(**doc.to_dict()))


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_url(
    request: SummarizeRequest,
    service: ExtractService = Depends(get_extract_service),
):
    """URL 본문 앞부분 요약"""
    try:
        summary = await service.summarize(request.url, request.max_chars, request.lang)
    except WebCalcException as e:
        logger.warning(f"[API] Summarize failed: {e}")
        raise to_http_exception(e) from e
    return SummarizeResponse(data=SummaryData(**summary))


@router.post("/math", response_model=MathResponse)
async def math_eval(request: MathRequest):
    """고정밀 수식 계산"""
    try:
        result = evaluate_expression(request.expression, request.mode, request.precision)
    except WebCalcException as e:
        logger.info(f"[API] Math evaluation rejected: {e}")
        raise to_http_exception(e) from e
    return MathResponse(data=MathData(**result.to_dict()))


@router.post("/wiki", response_model=WikiResponse)
async def wiki_get(
    request: WikiRequest,
    service: WikipediaService = Depends(get_wikipedia_service),
):
    """Wikipedia 문서 요약"""
    summary = await service.get_summary(request.title, request.lang)
    return WikiResponse(data=WikiData(**summary.to_dict()))
