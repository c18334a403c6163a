"""Wikipedia REST 요약 조회"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

from webcalc.core.config import settings
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.crawlers.http_client import SharedHttpClient, build_profile_headers, get_shared_http_client


SUMMARY_URL_TEMPLATE = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"
PAGE_URL_TEMPLATE = "https://{lang}.wikipedia.org/wiki/{title}"


@dataclass
class WikiSummary:
    lang: str
    title: str
    url: str
    description: Optional[str] = None
    extract: Optional[str] = None
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _quote_title(title: str) -> str:
    return quote(title.strip().replace(" ", "_"), safe="")


def minimal_summary(title: str, lang: str) -> WikiSummary:
    """조회 실패 시 반환하는 최소 요약 (페이지 URL만)"""
    return WikiSummary(
        lang=lang,
        title=title,
        url=PAGE_URL_TEMPLATE.format(lang=lang, title=_quote_title(title)),
    )


class WikipediaService:
    def __init__(self, http_client: Optional[SharedHttpClient] = None):
        self.http = http_client or get_shared_http_client()

    async def get_summary(self, title: str, lang: Optional[str] = None) -> WikiSummary:
        """문서 요약 조회

        비정상 응답/네트워크 오류는 예외 대신 최소 요약으로 대체합니다.
        """
        lang = (lang or settings.lang_default).strip().lower()
        url = SUMMARY_URL_TEMPLATE.format(lang=lang, title=_quote_title(title))

        try:
            resp = await self.http.fetch(
                url,
                headers={**build_profile_headers(lang), "Accept": "application/json"},
                timeout_s=settings.http_timeout / 1000.0,
            )
        except Exception as e:
            logger.warning(f"[WIKI] Request failed for '{sanitize_for_log(title)}': {type(e).__name__}: {e}")
            return minimal_summary(title, lang)

        if not resp.ok:
            logger.info(f"[WIKI] HTTP {resp.status} for '{sanitize_for_log(title)}'")
            return minimal_summary(title, lang)

        try:
            data = json.loads(resp.text or "{}")
        except ValueError:
            logger.warning(f"[WIKI] Non-JSON body for '{sanitize_for_log(title)}'")
            return minimal_summary(title, lang)
        if not isinstance(data, dict):
            logger.warning(f"[WIKI] Unexpected JSON {type(data).__name__} for '{sanitize_for_log(title)}'")
            return minimal_summary(title, lang)

        fallback = minimal_summary(title, lang)
        page_url = ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
        thumbnail = (data.get("thumbnail") or {}).get("source")
        return WikiSummary(
            lang=lang,
            title=data.get("title") or title,
            url=page_url or fallback.url,
            description=data.get("description"),
            extract=data.get("extract"),
            thumbnail_url=thumbnail,
        )
