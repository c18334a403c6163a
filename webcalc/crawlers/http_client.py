"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커져서
  Fast 경로의 짧은 예산을 잡아먹기 때문에 프로세스 단위로 세션을 재사용합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional

from curl_cffi.requests import AsyncSession

from webcalc.core.config import settings
from webcalc.core.logging import logger


@dataclass
class HttpResponse:
    """응답 요약

    url은 리다이렉트를 따라간 뒤의 실제 주소입니다. 상대 링크는 반드시
    이 주소를 기준으로 해석해야 합니다.
    """

    status: int
    url: str
    text: str = ""
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return (self.headers.get("content-type") or "").lower()


def build_profile_headers(lang: Optional[str] = None) -> Dict[str, str]:
    """User-Agent / Accept-Language 한 쌍을 같은 프로파일로 생성"""
    lang = (lang or settings.lang_default).strip()
    primary = lang.split("-")[0].lower()
    if primary == "en":
        accept_language = "en-US,en;q=0.9"
    else:
        accept_language = f"{lang},{primary};q=0.9,en;q=0.8"
    return {
        "User-Agent": settings.user_agent,
        "Accept-Language": accept_language,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.http_impersonate,
                headers=build_profile_headers(),
                allow_redirects=True,
                max_clients=settings.http_max_clients,
                trust_env=False,
            )
            return self._session

    async def fetch(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        follow_redirects: bool = True,
    ) -> HttpResponse:
        """GET 요청

        Raises:
            Exception: 연결/타임아웃 등 curl_cffi 오류는 그대로 전달됩니다.
        """
        sess = await self._ensure_session()
        resp = await sess.get(
            url,
            headers=headers,
            params=params,
            timeout=timeout_s,
            allow_redirects=follow_redirects,
        )
        raw_headers = getattr(resp, "headers", None) or {}
        return HttpResponse(
            status=getattr(resp, "status_code", 0) or 0,
            url=str(getattr(resp, "url", "") or url),
            text=getattr(resp, "text", "") or "",
            content=getattr(resp, "content", b"") or b"",
            headers={str(k).lower(): str(v) for k, v in raw_headers.items()},
        )

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
