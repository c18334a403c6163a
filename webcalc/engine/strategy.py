"""Escalation Strategy - Fast → Deep 승격 판단

Fast 엔진 결과만 보고 Deep 엔진을 호출할 가치가 있는지 판단하는 순수 휴리스틱.
권고(advisory)일 뿐이며 실제 실행 여부는 오케스트레이터가 결정합니다.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from .result import SearchItem


class EscalationReason(str, Enum):
    """승격 사유"""

    TOO_FEW_RESULTS = "too_few_results"
    WEAK_TITLES = "weak_titles"
    LOW_DIVERSITY = "low_diversity"
    RECENCY = "recency"


MIN_TITLE_LENGTH = 4
MIN_RESULTS_CAP = 3

# 상대 시간 표현: Fast 소스의 인덱스가 따라가지 못하는 시의성 질의
_RECENCY_WORDS = (
    "today",
    "tonight",
    "yesterday",
    "now",
    "latest",
    "recent",
    "recently",
    "breaking",
    "this week",
    "this month",
    "this year",
    "hôm nay",
    "hôm qua",
    "mới nhất",
    "hiện nay",
    "gần đây",
    "tuần này",
)

_RECENCY_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(w) for w in _RECENCY_WORDS) + r")(?!\w)",
    re.IGNORECASE,
)


def _domain_of(url: str) -> str:
    try:
        host = urlsplit(url).netloc.lower()
    except ValueError:
        return url
    return host or url


def has_recency_signal(query: str, current_year: Optional[int] = None) -> bool:
    """쿼리에 시의성 신호(상대 시간 단어 또는 올해 연도)가 있는가?"""
    if not query:
        return False
    if _RECENCY_PATTERN.search(query):
        return True
    year = current_year if current_year is not None else datetime.now().year
    return re.search(rf"(?<!\d){year}(?!\d)", query) is not None


def escalation_reasons(
    query: str,
    items: Sequence[SearchItem],
    desired: int,
    *,
    current_year: Optional[int] = None,
) -> List[EscalationReason]:
    """승격 사유 목록 (비어 있으면 승격 불필요)

    Args:
        query: 검색어
        items: Fast 엔진 결과
        desired: 요청된 결과 수
        current_year: 테스트용 연도 고정값

    Returns:
        List[EscalationReason]: 발동된 사유들
    """
    reasons: List[EscalationReason] = []

    if len(items) < min(desired, MIN_RESULTS_CAP):
        reasons.append(EscalationReason.TOO_FEW_RESULTS)

    if items:
        if all(len((it.title or "").strip()) < MIN_TITLE_LENGTH for it in items):
            reasons.append(EscalationReason.WEAK_TITLES)

        unique_domains = {_domain_of(it.url) for it in items}
        if len(unique_domains) <= math.ceil(len(items) / 3):
            reasons.append(EscalationReason.LOW_DIVERSITY)

    if has_recency_signal(query, current_year):
        reasons.append(EscalationReason.RECENCY)

    return reasons


def should_escalate(
    query: str,
    items: Sequence[SearchItem],
    desired: int,
    *,
    current_year: Optional[int] = None,
) -> bool:
    """Deep 엔진 승격 권고 여부"""
    return bool(escalation_reasons(query, items, desired, current_year=current_year))
