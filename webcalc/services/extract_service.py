"""문서 추출 서비스 (HTML/PDF → 본문 텍스트)

- HTML: trafilatura 본문 추출 + 메타데이터, 실패 시 selectolax로 title/body 텍스트
- PDF: pdfplumber로 전체 페이지 텍스트
"""

from __future__ import annotations

import io
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import pdfplumber
import trafilatura
from selectolax.parser import HTMLParser

from webcalc.core.config import settings
from webcalc.core.exceptions import ExtractionException, InvalidURLException
from webcalc.core.logging import logger, sanitize_for_log
from webcalc.crawlers.http_client import SharedHttpClient, build_profile_headers, get_shared_http_client
from webcalc.utils.url_utils import is_absolute_http_url


_SENTENCE_END_RE = re.compile(r"[.!?。](?=\s|$)")
EMPTY_SUMMARY = "(no content to summarize)"


@dataclass
class ExtractedDocument:
    """추출 결과"""

    url: str
    text: str
    title: Optional[str] = None
    byline: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    length: Optional[int] = None
    content_type: str = "text/html"

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def extract_pdf(content: bytes, url: str) -> ExtractedDocument:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
        meta = pdf.metadata or {}
        page_count = len(pdf.pages)

    title = meta.get("Title")
    return ExtractedDocument(
        url=url,
        text="\n".join(pages),
        title=str(title) if title else None,
        length=page_count,
        content_type="application/pdf",
    )


def extract_html(html: str, url: str) -> ExtractedDocument:
    parser = HTMLParser(html or "")
    root = parser.css_first("html")
    lang = (root.attributes.get("lang") or None) if root is not None else None

    text = trafilatura.extract(
        html,
        url=url,
        include_comments=False,
        include_tables=True,
        include_images=False,
        include_links=False,
        output_format="txt",
    ) or ""

    if text.strip():
        meta = trafilatura.extract_metadata(html, default_url=url)
        return ExtractedDocument(
            url=url,
            text=text,
            title=getattr(meta, "title", None) or None,
            byline=getattr(meta, "author", None) or None,
            site_name=getattr(meta, "sitename", None) or None,
            lang=lang,
            length=len(text),
        )

    # 본문 추출 실패: <title> + body 텍스트
    logger.debug(f"[EXTRACT] trafilatura returned nothing, falling back to body text: {sanitize_for_log(url)}")
    title_node = parser.css_first("title")
    body = parser.body
    body_text = body.text(separator=" ", strip=True) if body is not None else ""
    return ExtractedDocument(
        url=url,
        text=body_text,
        title=title_node.text(strip=True) if title_node is not None else None,
        lang=lang,
    )


class ExtractService:
    """URL 다운로드 + 본문 추출"""

    def __init__(self, http_client: Optional[SharedHttpClient] = None):
        self.http = http_client or get_shared_http_client()

    async def fetch_and_extract(self, url: str, lang: Optional[str] = None) -> ExtractedDocument:
        """URL을 받아 본문 텍스트를 추출합니다.

        Raises:
            InvalidURLException: http(s) 절대 URL이 아님
            ExtractionException: 다운로드 실패/비정상 응답
        """
        if not is_absolute_http_url(url):
            raise InvalidURLException(url, "must be an absolute http(s) URL")

        try:
            resp = await self.http.fetch(
                url,
                headers=build_profile_headers(lang),
                timeout_s=settings.http_timeout / 1000.0,
            )
        except Exception as e:
            logger.warning(f"[EXTRACT] Fetch failed: {type(e).__name__}: {e}")
            raise ExtractionException(url, f"{type(e).__name__}: {e}") from e

        if not resp.ok:
            raise ExtractionException(url, f"HTTP {resp.status}", {"url": url, "status": resp.status})

        if "pdf" in resp.content_type:
            return extract_pdf(resp.content, url)
        return extract_html(resp.text, url)

    async def summarize(self, url: str, max_chars: Optional[int] = None, lang: Optional[str] = None) -> Dict[str, Any]:
        """본문 앞부분을 문장 경계에서 잘라 요약으로 반환"""
        max_chars = max_chars or settings.summary_max_chars
        doc = await self.fetch_and_extract(url, lang)
        return {
            "url": doc.url,
            "title": doc.title,
            "summary": lead_summary(doc.text, max_chars),
        }


def lead_summary(text: str, max_chars: int) -> str:
    """max_chars 이내에서 마지막 문장 경계까지 자른 텍스트"""
    text = re.sub(r"\s+", " ", text or "").strip()
    if not text:
        return EMPTY_SUMMARY
    if len(text) <= max_chars:
        return text

    head = text[:max_chars]
    ends = [m.end() for m in _SENTENCE_END_RE.finditer(head)]
    # 문장 경계가 너무 앞쪽이면 그냥 자릅니다.
    if ends and ends[-1] >= max_chars // 2:
        return head[: ends[-1]].strip()
    return head.rstrip() + "..."
