"""FastPath Engine - DuckDuckGo HTML (no JavaScript)"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from webcalc.core.config import settings
from webcalc.core.exceptions import NetworkFailureException
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.engine.budget import Deadline
from webcalc.engine.result import EngineName, SearchItem

from .boundary import DdgHtmlStrategy, ResultParsingStrategy
from .http_client import SharedHttpClient, build_profile_headers, get_shared_http_client


DDG_HTML_URL = "https://html.duckduckgo.com/html/"


def ddg_region(lang: Optional[str]) -> Optional[str]:
    """DDG kl 파라미터 (예: "en-US" → "us-en", "vi" → "vi-vi")"""
    if not lang:
        return None
    parts = lang.replace("_", "-").split("-")
    primary = parts[0].lower()
    region = parts[1].lower() if len(parts) > 1 and parts[1] else primary
    return f"{region}-{primary}"


class DdgHtmlEngine:
    """HTTP 기반 빠른 검색 엔진

    특징:
    - 요청 1회, 재시도 없음
    - min(시간 예산, 네트워크 타임아웃 상한) 안에서만 실행
    - 상대 링크는 응답의 실제 최종 URL 기준으로 해석
    """

    name = EngineName.DDG_HTML

    def __init__(
        self,
        http_client: Optional[SharedHttpClient] = None,
        strategy: Optional[ResultParsingStrategy] = None,
        time_budget_ms: Optional[int] = None,
    ):
        """
        Args:
            http_client: 공유 HTTP 클라이언트 (없으면 프로세스 공용)
            strategy: 결과 파싱 전략 (기본값: DdgHtmlStrategy)
            time_budget_ms: Fast 경로 예산 (기본값: settings.fast_time_budget_ms)
        """
        self.http = http_client or get_shared_http_client()
        self.strategy = strategy or DdgHtmlStrategy()
        self.time_budget_ms = time_budget_ms or settings.fast_time_budget_ms

    def new_deadline(self) -> Deadline:
        return Deadline.start(self.time_budget_ms, settings.http_timeout)

    async def search(
        self,
        query: str,
        num: int,
        lang: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None,
    ) -> List[SearchItem]:
        """DDG HTML 검색

        Raises:
            NetworkFailureException: 타임아웃 또는 non-2xx 응답
        """
        deadline = deadline or self.new_deadline()
        params = {"q": query}
        region = ddg_region(lang)
        if region:
            params["kl"] = region

        logger.debug(
            f"[FastPath] Executing: query='{sanitize_for_log(query)}', "
            f"budget={deadline.budget_ms}ms"
        )

        try:
            resp = await deadline.run(
                self.http.fetch(
                    DDG_HTML_URL,
                    params=params,
                    headers=build_profile_headers(lang),
                    timeout_s=max(0.001, deadline.remaining_s()),
                )
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"[FastPath] Timeout after {deadline.elapsed_ms():.0f}ms")
            raise NetworkFailureException(self.name.value, f"timeout after {deadline.budget_ms}ms") from e
        except Exception as e:
            logger.warning(f"[FastPath] Request failed: {type(e).__name__}: {e}")
            raise NetworkFailureException(self.name.value, f"{type(e).__name__}: {e}") from e

        if not resp.ok:
            logger.warning(f"[FastPath] Non-success status: {resp.status}")
            raise NetworkFailureException(
                self.name.value,
                f"HTTP {resp.status}",
                {"engine": self.name.value, "status": resp.status},
            )

        items = self.strategy.parse(resp.text, resp.url, num)
        logger.debug(
            f"[FastPath] Parsed {len(items)} item(s) with {self.strategy.name}@{self.strategy.version}"
        )
        return items
