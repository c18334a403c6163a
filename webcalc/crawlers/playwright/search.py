"""Bing 검색 결과 페이지 탐색 + in-page 추출 (Playwright)."""

from __future__ import annotations

import asyncio
from typing import List, Optional
from urllib.parse import urlencode

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from webcalc.core.exceptions import NetworkFailureException, ParseFailureException
from webcalc.core.logging import logger
from webcalc.engine.result import EngineName, SearchItem

from ..boundary import BingCardStrategy


BING_SEARCH_URL = "https://www.bing.com/search"


def build_search_url(query: str, lang: Optional[str], num: int) -> str:
    params = {"q": query, "count": str(max(1, min(num, 50)))}
    if lang:
        params["setLang"] = lang
    return f"{BING_SEARCH_URL}?{urlencode(params)}"


async def search_results(
    page: Page,
    query: str,
    num: int,
    lang: Optional[str],
    *,
    strategy: BingCardStrategy,
    goto_timeout_ms: int,
    settle_ms: int,
) -> List[SearchItem]:
    """검색 페이지로 이동해 결과 카드를 추출합니다.

    Args:
        page: 설정 완료된 Page (리소스 차단 등)
        query: 검색어
        num: 최대 결과 수
        lang: 언어 힌트
        strategy: 카드 셀렉터 전략
        goto_timeout_ms: 네비게이션 타임아웃
        settle_ms: DOMContentLoaded 이후 동적 렌더링 대기 시간

    Returns:
        List[SearchItem]: 최대 num개의 결과

    Raises:
        NetworkFailureException: 네비게이션 실패/타임아웃
        ParseFailureException: in-page 추출과 HTML 폴백이 모두 실패
    """
    engine = EngineName.BING_PW.value
    url = build_search_url(query, lang, num)

    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=goto_timeout_ms)
    except PlaywrightTimeoutError as e:
        raise NetworkFailureException(engine, f"navigation timeout after {goto_timeout_ms}ms") from e
    except PlaywrightError as e:
        raise NetworkFailureException(engine, f"navigation failed: {e}") from e

    if settle_ms > 0:
        await asyncio.sleep(settle_ms / 1000.0)

    base_url = page.url or url

    try:
        raw = await page.evaluate(strategy.script, strategy.script_args(num))
        return strategy.to_items(raw or [], base_url, num)
    except PlaywrightError as e:
        logger.info(f"[DeepPath] In-page extraction failed, parsing HTML instead: {type(e).__name__}: {e}")

    try:
        html = await page.content()
    except PlaywrightError as e:
        raise ParseFailureException(engine, f"page content unavailable: {e}") from e
    return strategy.parse(html, base_url, num)
