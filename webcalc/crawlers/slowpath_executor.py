"""SlowPath Engine - Bing via headless Chromium (Playwright)"""

from __future__ import annotations

from typing import List, Optional

from webcalc.core.config import settings
from webcalc.core.exceptions import (
    EngineUnavailableException,
    NetworkFailureException,
    ParseFailureException,
)
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.engine.budget import Deadline
from webcalc.engine.result import EngineName, SearchItem

from .boundary import BingCardStrategy
from .playwright.browser import BrowserHandle, get_shared_browser_handle, locale_for
from .playwright.pages import configure_page


class BingPlaywrightEngine:
    """Playwright 기반 느린 검색 엔진

    특징:
    - JavaScript 렌더링 결과 페이지 대응
    - 공유 브라우저(BrowserHandle)에서 요청마다 자기 page를 열고 닫음
    - 브라우저 자체를 못 띄우면 EngineUnavailableException

    Usage:
        engine = BingPlaywrightEngine(handle)
        items = await engine.search("python asyncio", num=5, lang="en")
    """

    name = EngineName.BING_PW

    def __init__(
        self,
        browser: Optional[BrowserHandle] = None,
        strategy: Optional[BingCardStrategy] = None,
        settle_ms: Optional[int] = None,
    ):
        """
        Args:
            browser: 공유 브라우저 핸들 (없으면 프로세스 공용)
            strategy: 카드 파싱 전략
            settle_ms: 로드 후 렌더링 대기 (기본값: settings.deep_settle_ms)
        """
        self.browser = browser or get_shared_browser_handle()
        self.strategy = strategy or BingCardStrategy()
        self.settle_ms = settings.deep_settle_ms if settle_ms is None else settle_ms

    async def search(
        self,
        query: str,
        num: int,
        lang: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None,
    ) -> List[SearchItem]:
        """Bing 검색

        Raises:
            EngineUnavailableException: playwright 미설치/브라우저 실행 불가
            NetworkFailureException: 네비게이션 실패
            ParseFailureException: 결과 추출 실패
        """
        try:
            from .playwright.search import search_results
        except ImportError as e:
            raise EngineUnavailableException(self.name.value, "playwright is not installed") from e

        goto_timeout_ms = settings.http_timeout
        if deadline is not None:
            goto_timeout_ms = max(1, min(goto_timeout_ms, int(deadline.remaining_ms())))

        logger.debug(
            f"[DeepPath] Executing: query='{sanitize_for_log(query)}', "
            f"goto_timeout={goto_timeout_ms}ms"
        )

        page_ready = False
        try:
            async with self.browser.open_page(
                locale=locale_for(lang),
                user_agent=settings.user_agent,
                configure=configure_page,
            ) as page:
                page_ready = True
                items = await search_results(
                    page,
                    query,
                    num,
                    lang,
                    strategy=self.strategy,
                    goto_timeout_ms=goto_timeout_ms,
                    settle_ms=self.settle_ms,
                )
        except (EngineUnavailableException, NetworkFailureException, ParseFailureException):
            raise
        except Exception as e:
            if page_ready:
                # 페이지는 열렸고 탐색/추출 중 예상 밖의 오류
                logger.warning(f"[DeepPath] Unexpected extraction error: {type(e).__name__}: {e}")
                raise ParseFailureException(self.name.value, f"{type(e).__name__}: {e}") from e
            # context/page 생성 단계의 실패 (브라우저 크래시 등)
            logger.error(f"[DeepPath] Page setup failed: {type(e).__name__}: {e}")
            raise EngineUnavailableException(self.name.value, f"page setup failed: {type(e).__name__}: {e}") from e

        logger.debug(f"[DeepPath] Extracted {len(items)} item(s)")
        return items
