"""Playwright 공용 브라우저 핸들.

프로세스당 브라우저는 최대 1개만 띄웁니다. 전역 모듈 상태 대신
참조 카운트를 가진 BrowserHandle 객체로 감싸 Deep 엔진에 주입하므로
수명주기(launch/close)를 테스트에서 직접 관찰할 수 있습니다.

- 지연 초기화: 첫 open_page() 시점에 launch
- 동시 초기화 방지: 동시에 들어온 요청은 같은 launch task를 기다림
  (asyncio.shield로 감싸서 한 요청의 취소가 launch를 중단시키지 않음)
- 요청마다 자기 context/page를 열고, 종료 시 자기 것만 닫음
"""

from __future__ import annotations

import asyncio
import platform
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator, Awaitable, Callable, Optional

from webcalc.core.config import settings
from webcalc.core.exceptions import EngineUnavailableException
from webcalc.core.logging import logger

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page


ENGINE_TAG = "bing_pw"

# (playwright, browser) 튜플을 돌려주는 launcher. 테스트에서 교체합니다.
Launcher = Callable[[], Awaitable[tuple[Any, Any]]]


def build_launch_args() -> list[str]:
    args: list[str] = [
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--disable-background-networking",
        "--disable-background-timer-throttling",
        "--disable-renderer-backgrounding",
        "--disable-default-apps",
        "--disable-extensions",
        "--no-first-run",
        "--no-default-browser-check",
    ]

    if platform.system().lower() == "linux":
        args.extend(["--no-sandbox", "--disable-setuid-sandbox"])

    return args


def locale_for(lang: Optional[str]) -> str:
    """언어 힌트 → 브라우저 locale (예: "vi" → "vi-VN", "en" → "en-US")"""
    if not lang:
        return "en-US"
    parts = lang.replace("_", "-").split("-")
    primary = parts[0].lower()
    if len(parts) > 1 and parts[1]:
        return f"{primary}-{parts[1].upper()}"
    region = {"en": "US", "vi": "VN", "ko": "KR", "ja": "JP", "zh": "CN"}.get(primary, primary.upper())
    return f"{primary}-{region}"


async def launch_chromium() -> tuple[Any, Any]:
    """Playwright 시작 + Chromium launch

    Raises:
        EngineUnavailableException: playwright 미설치/브라우저 실행 불가
    """
    try:
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise EngineUnavailableException(ENGINE_TAG, "playwright is not installed") from e

    pw = None
    try:
        pw = await asyncio.wait_for(async_playwright().start(), timeout=20.0)
        browser = await asyncio.wait_for(
            pw.chromium.launch(
                headless=settings.browser_headless,
                args=build_launch_args(),
            ),
            timeout=settings.browser_launch_timeout_s,
        )
        return pw, browser
    except Exception as e:
        if pw is not None:
            try:
                await pw.stop()
            except Exception as stop_err:
                logger.debug(f"[Playwright] stop after failed launch: {type(stop_err).__name__}")
        raise EngineUnavailableException(
            ENGINE_TAG,
            f"browser launch failed: {type(e).__name__}: {e}",
        ) from e


class BrowserHandle:
    """참조 카운트 기반 공유 브라우저 핸들

    Usage:
        handle = BrowserHandle()
        handle.retain()                 # 소유자 등록 (앱 시작 시)

        async with handle.open_page(locale="en-US") as page:
            await page.goto(...)

        await handle.release()          # 마지막 소유자가 놓으면 브라우저 종료
    """

    def __init__(self, launcher: Optional[Launcher] = None):
        self._launcher: Launcher = launcher or launch_chromium
        self._launch_task: Optional[asyncio.Task] = None
        self._playwright: Any = None
        self._browser: Optional["Browser"] = None
        self._refs = 0
        self.launch_count = 0
        self.active_pages = 0

    @property
    def refs(self) -> int:
        return self._refs

    @property
    def is_running(self) -> bool:
        if self._browser is None:
            return False
        try:
            return bool(self._browser.is_connected())
        except Exception:
            return False

    def retain(self) -> "BrowserHandle":
        self._refs += 1
        return self

    async def release(self) -> None:
        if self._refs <= 0:
            logger.warning("[Playwright] release() called without matching retain()")
            return
        self._refs -= 1
        if self._refs == 0:
            await self.close()

    async def _launch(self, dispose_first: bool = False) -> "Browser":
        if dispose_first:
            # 이전 브라우저 연결이 끊긴 경우
            await self._dispose()
        logger.info("[Playwright] Launching shared browser...")
        pw, browser = await self._launcher()
        self._playwright = pw
        self._browser = browser
        self.launch_count += 1
        logger.info(f"[Playwright] Browser launched (launch_count={self.launch_count})")
        return browser

    @staticmethod
    def _consume_launch_error(task: asyncio.Task) -> None:
        # 기다리던 요청이 모두 취소된 경우에도 예외가 조용히 유실되지 않도록 기록
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            logger.warning(f"[Playwright] Launch failed: {err}")

    async def get_browser(self) -> "Browser":
        """브라우저 확보 (없으면 launch, 진행 중이면 같은 launch를 대기)

        Raises:
            EngineUnavailableException: 브라우저 실행 불가
        """
        if self.is_running:
            return self._browser  # type: ignore[return-value]

        task = self._launch_task
        if task is None or task.done():
            # 확인과 등록 사이에 await가 없어야 동시 호출이 같은 task를 공유합니다.
            stale = task is not None and not task.cancelled() and task.exception() is None
            task = asyncio.get_running_loop().create_task(self._launch(dispose_first=stale))
            task.add_done_callback(self._consume_launch_error)
            self._launch_task = task

        try:
            return await asyncio.shield(task)
        except EngineUnavailableException:
            raise
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise EngineUnavailableException(ENGINE_TAG, f"{type(e).__name__}: {e}") from e

    @asynccontextmanager
    async def open_page(
        self,
        *,
        locale: str = "en-US",
        user_agent: Optional[str] = None,
        configure: Optional[Callable[["Page"], Awaitable[Any]]] = None,
    ) -> AsyncIterator["Page"]:
        """요청 전용 context/page를 열고, 블록 종료 시 반드시 닫습니다."""
        browser = await self.get_browser()
        context = await browser.new_context(
            locale=locale,
            user_agent=user_agent or settings.user_agent,
            viewport={
                "width": settings.browser_viewport_width,
                "height": settings.browser_viewport_height,
            },
        )
        self.active_pages += 1
        try:
            page = await context.new_page()
            if configure is not None:
                await configure(page)
            yield page
        finally:
            self.active_pages -= 1
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"[Playwright] Failed to close page context: {type(e).__name__}: {e}")

    async def _dispose(self) -> None:
        browser, pw = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.debug(f"[Playwright] browser.close failed: {type(e).__name__}: {e}")
        if pw is not None:
            try:
                await pw.stop()
            except Exception as e:
                logger.debug(f"[Playwright] playwright.stop failed: {type(e).__name__}: {e}")

    async def close(self) -> None:
        """브라우저 종료 (진행 중인 launch가 있으면 끝난 뒤 정리)"""
        task = self._launch_task
        self._launch_task = None
        if task is not None and not task.done():
            try:
                await task
            except Exception as e:
                logger.debug(f"[Playwright] Pending launch failed during close: {type(e).__name__}")
        await self._dispose()
        logger.info("[Playwright] Shared browser closed")


_shared_handle = BrowserHandle()


def get_shared_browser_handle() -> BrowserHandle:
    return _shared_handle
