"""Merge/Dedup - 여러 엔진 결과 병합

우선순위 순서대로 리스트를 순회하며 canonical key(origin + path)를
처음 본 항목만 남깁니다.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Sequence
from urllib.parse import urlsplit

from .result import SearchItem


class MergePriority(str, Enum):
    """병합 우선순위"""

    FAST_FIRST = "fast_first"
    DEEP_FIRST = "deep_first"


_DEFAULT_PORTS = {"http": 80, "https": 443}


def canonical_key(url: str) -> str:
    """중복 제거용 키: origin + path

    origin은 scheme://host[:port] 이며 기본 포트와 userinfo는 제외합니다.
    query/fragment는 무시합니다. 파싱이 불가능하면 원문을 그대로 사용합니다.
    """
    try:
        parts = urlsplit(url)
        # 잘못된 포트는 .port 접근 시 ValueError
        port = parts.port
    except ValueError:
        return url
    host = parts.hostname
    if not parts.scheme or not host:
        return url

    scheme = parts.scheme.lower()
    if ":" in host:
        host = f"[{host}]"
    origin = f"{scheme}://{host}"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        origin = f"{origin}:{port}"
    return f"{origin}{parts.path or '/'}"


def merge_dedupe(lists: Iterable[Sequence[SearchItem]], limit: int) -> List[SearchItem]:
    """우선순위 순서로 병합 + 중복 제거

    Args:
        lists: 우선순위가 높은 것부터 정렬된 결과 리스트들
        limit: 출력 상한

    Returns:
        List[SearchItem]: canonical key가 모두 다른 결과 (길이 <= limit)
    """
    out: List[SearchItem] = []
    if limit <= 0:
        return out

    seen: set[str] = set()
    for items in lists:
        for item in items:
            key = canonical_key(item.url)
            if key in seen:
                continue
            seen.add(key)
            out.append(item)
            if len(out) >= limit:
                return out
    return out
