"""Playwright page 설정/보조 함수.

Page 생성 후 라우팅(리소스 차단) 등 공통 설정을 분리합니다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from webcalc.core.config import settings
from webcalc.core.logging import logger

if TYPE_CHECKING:
    from playwright.async_api import Page, Request, Route


BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font", "websocket"})

BLOCKED_EXTENSIONS = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".svg",
    ".ico",
    ".mp4",
    ".webm",
    ".woff",
    ".woff2",
    ".ttf",
)


def should_block(resource_type: str, url: str) -> bool:
    """지연/노이즈만 늘리는 리소스인지 판단"""
    if resource_type in BLOCKED_RESOURCE_TYPES:
        return True
    path = (url or "").lower().split("?", 1)[0]
    return path.endswith(BLOCKED_EXTENSIONS)


async def _route_handler(route: "Route", request: "Request") -> None:
    if should_block(request.resource_type, request.url):
        await route.abort()
        return
    await route.continue_()


async def configure_page(page: "Page") -> "Page":
    page.set_default_timeout(settings.http_timeout)
    await page.route("**/*", _route_handler)

    # WebSocket은 page.route로 잡히지 않으므로 지원되는 버전에서는 별도로 차단
    route_ws = getattr(page, "route_web_socket", None)
    if route_ws is not None:
        async def _close_ws(ws) -> None:
            await ws.close()

        try:
            await route_ws("**/*", _close_ws)
        except Exception as e:
            logger.debug(f"[Playwright] route_web_socket unavailable: {type(e).__name__}")

    return page
