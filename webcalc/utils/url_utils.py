"""URL 파싱 유틸리티"""
import base64
import binascii
from typing import Optional
from urllib.parse import parse_qs, urljoin, urlsplit


_SKIP_SCHEMES = ("javascript:", "mailto:", "tel:", "data:")


def is_absolute_http_url(url: str) -> bool:
    """http(s) 절대 URL인지 확인 (파싱 불가하면 False)"""
    if not url:
        return False
    try:
        parts = urlsplit(url)
        _ = parts.port
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def resolve_href(href: str, base_url: str) -> Optional[str]:
    """상대/프로토콜-상대 href를 base_url 기준 절대 URL로 변환합니다.

    Examples:
        >>> resolve_href("/l/?uddg=x", "https://html.duckduckgo.com/html/?q=a")
        'https://html.duckduckgo.com/l/?uddg=x'
        >>> resolve_href("//example.com/a", "https://html.duckduckgo.com/html/")
        'https://example.com/a'
        >>> resolve_href("javascript:void(0)", "https://example.com") is None
        True

    Returns:
        절대 URL 또는 None (해석 불가/비 http 링크)
    """
    if not href:
        return None

    h = href.strip()
    if not h or h.startswith("#") or h.lower().startswith(_SKIP_SCHEMES):
        return None

    try:
        absolute = urljoin(base_url, h)
    except ValueError:
        return None

    if not is_absolute_http_url(absolute):
        return None
    return absolute


def _decode_bing_target(value: str) -> Optional[str]:
    # Bing ck/a 링크: u=a1<base64url(원본 URL)>
    if not value.startswith("a1"):
        return None
    encoded = value[2:]
    encoded += "=" * (-len(encoded) % 4)
    try:
        return base64.urlsafe_b64decode(encoded).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None


def unwrap_redirect(url: str) -> str:
    """검색 엔진 리다이렉트 래퍼 링크에서 실제 목적지 URL을 복원합니다.

    - DuckDuckGo: https://duckduckgo.com/l/?uddg=<encoded>&rut=...
    - Bing: https://www.bing.com/ck/a?...&u=a1<base64url>

    래퍼가 아니거나 복원에 실패하면 입력을 그대로 반환합니다.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    host = parts.netloc.lower()
    params = parse_qs(parts.query)
    target: Optional[str] = None

    if host.endswith("duckduckgo.com") and parts.path.startswith("/l/"):
        values = params.get("uddg")
        if values:
            target = values[0]
    elif host.endswith("bing.com") and parts.path.startswith("/ck/a"):
        values = params.get("u")
        if values:
            target = _decode_bing_target(values[0])

    if target and is_absolute_http_url(target):
        return target
    return url
