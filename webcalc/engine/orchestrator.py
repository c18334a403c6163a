"""Two-Tier Search Orchestrator - Main Engine Entry Point

모드별로 실행 경로를 고릅니다.
1. fast: DDG HTML만
2. deep: Playwright(Bing)만
3. auto: Fast → 승격 정책 평가 → (필요 시) Deep → 병합/중복 제거

모든 경로에서 엔진별 소요 시간/결과 수/호출 순서/승격 여부를 기록합니다.
"""

from __future__ import annotations

from typing import List, Optional, Union

from webcalc.core.config import settings
from webcalc.core.exceptions import EngineException, EngineUnavailableException
from webcalc.core.logging import logger, sanitize_for_log

from .budget import Deadline, Stopwatch
from .merge import MergePriority, merge_dedupe
from .result import EngineDiagnostics, SearchItem, SearchMode, SearchReport
from .strategy import escalation_reasons


class SearchOrchestrator:
    """2단 검색 오케스트레이터

    Fast 엔진 결과가 품질 기준에 못 미칠 때만 Deep 엔진으로 승격하고,
    Deep 엔진 실패는 auto 모드에서 Fast 결과로 우아하게 강등합니다.
    """

    def __init__(
        self,
        fast_engine=None,
        deep_engine=None,
        merge_priority: Union[MergePriority, str, None] = None,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
        default_lang: Optional[str] = None,
    ):
        """
        Args:
            fast_engine: Fast 엔진 (search 메서드 구현, 기본값: DdgHtmlEngine)
            deep_engine: Deep 엔진 (search 메서드 구현, 기본값: BingPlaywrightEngine)
            merge_priority: 병합 우선순위 (기본값: settings.search_merge_priority)
            default_limit: limit 미지정 시 결과 수
            max_limit: limit 상한
            default_lang: 언어 미지정 시 기본값
        """
        if fast_engine is None or deep_engine is None:
            from webcalc.crawlers import BingPlaywrightEngine, DdgHtmlEngine

            fast_engine = fast_engine or DdgHtmlEngine()
            deep_engine = deep_engine or BingPlaywrightEngine()

        self.fast = fast_engine
        self.deep = deep_engine
        self.merge_priority = MergePriority(merge_priority or settings.search_merge_priority)
        self.default_limit = default_limit or settings.max_results
        self.max_limit = max_limit or settings.search_max_results
        self.default_lang = default_lang or settings.lang_default
        self.fast_time_budget_ms = int(getattr(self.fast, "time_budget_ms", 0) or settings.fast_time_budget_ms)

    def _clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = self.default_limit
        return max(1, min(int(limit), self.max_limit))

    async def perform_search(
        self,
        query: str,
        mode: Union[SearchMode, str] = SearchMode.AUTO,
        limit: Optional[int] = None,
        language: Optional[str] = None,
    ) -> SearchReport:
        """통합 검색 실행

        Args:
            query: 검색어
            mode: fast | deep | auto
            limit: 최대 결과 수 ([1, max_limit]으로 보정)
            language: 언어 힌트

        Returns:
            SearchReport: 결과 + 진단 정보

        Raises:
            ValueError: 알 수 없는 mode
            EngineUnavailableException: deep 모드에서 브라우저 사용 불가
        """
        mode = SearchMode(mode)

        if not query or not query.strip():
            logger.info("[Orchestrator] Blank query, no engine invoked")
            return SearchReport.empty(mode)

        query = query.strip()
        limit = self._clamp_limit(limit)
        lang = language or self.default_lang

        logger.info(
            f"Search started: query='{sanitize_for_log(query)}', mode={mode.value}, limit={limit}"
        )

        if mode is SearchMode.FAST:
            report = await self._run_fast(query, limit, lang)
        elif mode is SearchMode.DEEP:
            report = await self._run_deep(query, limit, lang)
        else:
            report = await self._run_auto(query, limit, lang)

        report.items = report.items[:limit]
        logger.info(
            f"Search completed: mode={mode.value}, engines={[e.value for e in report.engines_used]}, "
            f"escalated={report.escalated}, items={len(report.items)}"
        )
        return report

    async def _invoke(
        self,
        engine,
        query: str,
        limit: int,
        lang: str,
        report: SearchReport,
        deadline: Optional[Deadline] = None,
    ) -> List[SearchItem]:
        """엔진 1회 호출 + 진단 기록

        예외는 진단에 기록한 뒤 그대로 다시 던집니다.
        """
        diag = EngineDiagnostics()
        if deadline is not None:
            diag.time_budget_ms = deadline.budget_ms
        report.engines_used.append(engine.name)
        report.diagnostics[engine.name] = diag

        watch = Stopwatch()
        try:
            items = await engine.search(query, limit, lang, deadline=deadline)
        except Exception as e:
            diag.elapsed_ms = watch.elapsed_ms()
            diag.error_code = getattr(e, "error_code", "UNEXPECTED_ERROR")
            diag.error = getattr(e, "message", None) or f"{type(e).__name__}: {e}"
            raise

        diag.elapsed_ms = watch.elapsed_ms()
        diag.count = len(items)
        return list(items)

    async def _try_fast(self, query: str, limit: int, lang: str, report: SearchReport) -> List[SearchItem]:
        """Fast 엔진 실패(네트워크/파싱)는 빈 결과로 복구"""
        deadline = Deadline.start(self.fast_time_budget_ms, settings.http_timeout)
        try:
            return await self._invoke(self.fast, query, limit, lang, report, deadline)
        except EngineException as e:
            logger.warning(f"[Orchestrator] Fast engine failed, treating as empty: {e}")
            return []
        except Exception as e:
            logger.error(f"[Orchestrator] Fast engine crashed: {type(e).__name__}: {e}", exc_info=True)
            return []

    async def _run_fast(self, query: str, limit: int, lang: str) -> SearchReport:
        report = SearchReport(mode_used=SearchMode.FAST)
        report.items = await self._try_fast(query, limit, lang, report)
        return report

    async def _run_deep(self, query: str, limit: int, lang: str) -> SearchReport:
        report = SearchReport(mode_used=SearchMode.DEEP)
        try:
            report.items = await self._invoke(self.deep, query, limit, lang, report)
        except EngineUnavailableException:
            logger.error("[Orchestrator] Deep engine unavailable in deep mode")
            raise
        except EngineException as e:
            logger.warning(f"[Orchestrator] Deep engine failed, returning empty result: {e}")
            report.items = []
        return report

    async def _run_auto(self, query: str, limit: int, lang: str) -> SearchReport:
        report = SearchReport(mode_used=SearchMode.AUTO)
        fast_items = await self._try_fast(query, limit, lang, report)

        reasons = escalation_reasons(query, fast_items, limit)
        if not reasons:
            report.items = fast_items
            return report

        report.escalated = True
        report.escalation_reasons = [r.value for r in reasons]
        logger.info(f"[Orchestrator] Escalating to deep engine: reasons={report.escalation_reasons}")

        try:
            deep_items = await self._invoke(self.deep, query, limit, lang, report)
        except Exception as e:
            # 강등: Fast 결과는 그대로 보존
            report.diagnostics[self.deep.name].degraded = True
            logger.warning(f"[Orchestrator] Deep engine failed, degrading to fast results: {e}")
            report.items = fast_items
            return report

        if self.merge_priority is MergePriority.DEEP_FIRST:
            ordered = [deep_items, fast_items]
        else:
            ordered = [fast_items, deep_items]
        report.items = merge_dedupe(ordered, limit)
        report.merge_priority = self.merge_priority.value
        return report
