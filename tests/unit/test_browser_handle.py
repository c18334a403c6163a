"""BrowserHandle 수명주기 테스트 (Fake launcher, 실제 브라우저 없음)"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from webcalc.core.exceptions import EngineUnavailableException
from webcalc.crawlers.playwright import BrowserHandle, locale_for


class FakeContext:
    def __init__(self, page_error: Exception | None = None):
        self.page_error = page_error
        self.closed = False
        self.page = MagicMock(name="page")

    async def new_page(self):
        if self.page_error is not None:
            raise self.page_error
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.connected = True
        self.contexts: list[FakeContext] = []
        self.context_kwargs: list[dict] = []
        self.next_page_error: Exception | None = None
        self.close = AsyncMock(side_effect=self._close)

    async def _close(self):
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    async def new_context(self, **kwargs):
        ctx = FakeContext(self.next_page_error)
        self.contexts.append(ctx)
        self.context_kwargs.append(kwargs)
        return ctx


def make_launcher(delay_s: float = 0.01, error: Exception | None = None):
    state = {"calls": 0, "browsers": []}

    async def launcher():
        state["calls"] += 1
        await asyncio.sleep(delay_s)
        if error is not None:
            raise error
        browser = FakeBrowser()
        state["browsers"].append(browser)
        return AsyncMock(name="playwright"), browser

    return launcher, state


class TestBrowserLaunch:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_launch(self):
        launcher, state = make_launcher(delay_s=0.05)
        handle = BrowserHandle(launcher=launcher)

        browsers = await asyncio.gather(*(handle.get_browser() for _ in range(10)))

        assert state["calls"] == 1
        assert handle.launch_count == 1
        assert all(b is browsers[0] for b in browsers)

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_launch(self):
        launcher, state = make_launcher(delay_s=0.05)
        handle = BrowserHandle(launcher=launcher)

        first = asyncio.ensure_future(handle.get_browser())
        await asyncio.sleep(0)
        second = asyncio.ensure_future(handle.get_browser())
        await asyncio.sleep(0.01)
        first.cancel()

        browser = await second
        assert browser.is_connected()
        assert state["calls"] == 1

    @pytest.mark.asyncio
    async def test_launch_failure_is_engine_unavailable(self):
        launcher, _ = make_launcher(error=EngineUnavailableException("bing_pw", "no chromium"))
        handle = BrowserHandle(launcher=launcher)

        with pytest.raises(EngineUnavailableException):
            await handle.get_browser()

    @pytest.mark.asyncio
    async def test_unexpected_launch_error_is_wrapped(self):
        launcher, _ = make_launcher(error=OSError("exec format error"))
        handle = BrowserHandle(launcher=launcher)

        with pytest.raises(EngineUnavailableException):
            await handle.get_browser()

    @pytest.mark.asyncio
    async def test_failed_launch_is_retried_on_next_request(self):
        calls = {"n": 0}

        async def flaky():
            calls["n"] += 1
            if calls["n"] == 1:
                raise EngineUnavailableException("bing_pw", "first launch fails")
            return AsyncMock(), FakeBrowser()

        handle = BrowserHandle(launcher=flaky)
        with pytest.raises(EngineUnavailableException):
            await handle.get_browser()

        browser = await handle.get_browser()
        assert browser.is_connected()
        assert handle.launch_count == 1

    @pytest.mark.asyncio
    async def test_disconnected_browser_is_relaunched(self):
        launcher, state = make_launcher()
        handle = BrowserHandle(launcher=launcher)

        first = await handle.get_browser()
        first.connected = False
        second = await handle.get_browser()

        assert second is not first
        assert state["calls"] == 2
        first.close.assert_awaited()


class TestOpenPage:
    @pytest.mark.asyncio
    async def test_context_closed_after_success(self):
        launcher, state = make_launcher()
        handle = BrowserHandle(launcher=launcher)
        configure = AsyncMock()

        async with handle.open_page(locale="vi-VN", user_agent="UA/1.0", configure=configure) as page:
            assert handle.active_pages == 1

        browser = state["browsers"][0]
        assert browser.contexts[0].closed is True
        assert browser.context_kwargs[0]["locale"] == "vi-VN"
        assert browser.context_kwargs[0]["user_agent"] == "UA/1.0"
        assert "viewport" in browser.context_kwargs[0]
        configure.assert_awaited_once_with(page)
        assert handle.active_pages == 0

    @pytest.mark.asyncio
    async def test_context_closed_when_body_fails(self):
        launcher, state = make_launcher()
        handle = BrowserHandle(launcher=launcher)

        with pytest.raises(RuntimeError):
            async with handle.open_page(locale="en-US"):
                raise RuntimeError("navigation exploded")

        assert state["browsers"][0].contexts[0].closed is True
        assert handle.active_pages == 0

    @pytest.mark.asyncio
    async def test_context_closed_when_page_creation_fails(self):
        launcher, _ = make_launcher()
        handle = BrowserHandle(launcher=launcher)
        browser = await handle.get_browser()
        browser.next_page_error = RuntimeError("target closed")

        with pytest.raises(RuntimeError):
            async with handle.open_page(locale="en-US"):
                pass

        assert browser.contexts[0].closed is True

    @pytest.mark.asyncio
    async def test_shared_browser_is_not_closed_by_requests(self):
        launcher, _ = make_launcher()
        handle = BrowserHandle(launcher=launcher)

        for _ in range(3):
            async with handle.open_page(locale="en-US"):
                pass

        assert handle.is_running
        assert handle.launch_count == 1


class TestRefCounting:
    @pytest.mark.asyncio
    async def test_last_release_closes_browser(self):
        launcher, state = make_launcher()
        handle = BrowserHandle(launcher=launcher)
        handle.retain()
        handle.retain()
        await handle.get_browser()

        await handle.release()
        assert handle.is_running
        assert handle.refs == 1

        await handle.release()
        assert not handle.is_running
        assert handle.refs == 0
        state["browsers"][0].close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unmatched_release_is_ignored(self):
        handle = BrowserHandle(launcher=make_launcher()[0])
        await handle.release()
        assert handle.refs == 0

    @pytest.mark.asyncio
    async def test_close_waits_for_pending_launch(self):
        launcher, state = make_launcher(delay_s=0.05)
        handle = BrowserHandle(launcher=launcher)

        pending = asyncio.ensure_future(handle.get_browser())
        await asyncio.sleep(0)
        await handle.close()

        assert not handle.is_running
        browser = await pending
        browser_close = state["browsers"][0].close
        browser_close.assert_awaited()


@pytest.mark.parametrize(
    "lang,expected",
    [("vi", "vi-VN"), ("en", "en-US"), (None, "en-US"), ("pt-br", "pt-BR"), ("de", "de-DE")],
)
def test_locale_for(lang, expected):
    assert locale_for(lang) == expected
