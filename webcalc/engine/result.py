"""Search Result - Standardized Result Format

Fast/Deep 엔진과 오케스트레이터가 공유하는 요청 단위(request-scoped) 데이터 모델.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SearchMode(str, Enum):
    """검색 모드"""

    FAST = "fast"  # DDG HTML만
    DEEP = "deep"  # Playwright(Bing)만
    AUTO = "auto"  # Fast → (필요 시) Deep


class EngineName(str, Enum):
    """엔진 태그"""

    DDG_HTML = "ddg_html"
    BING_PW = "bing_pw"


@dataclass
class SearchItem:
    """검색 결과 1건

    Attributes:
        title: 제목 (앵커 텍스트가 비면 URL)
        url: 절대 URL
        snippet: 요약문 (선택사항)
        source: 결과를 만든 엔진 태그
    """

    title: str
    url: str
    snippet: Optional[str] = None
    source: EngineName = EngineName.DDG_HTML

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "source": self.source.value,
        }


@dataclass
class EngineDiagnostics:
    """엔진별 관측 지표"""

    elapsed_ms: float = 0.0
    count: int = 0
    error_code: Optional[str] = None
    error: Optional[str] = None
    degraded: bool = False
    time_budget_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "elapsed_ms": round(self.elapsed_ms, 1),
            "count": self.count,
            "degraded": self.degraded,
        }
        if self.error_code:
            data["error_code"] = self.error_code
            data["error"] = self.error
        if self.time_budget_ms is not None:
            data["time_budget_ms"] = self.time_budget_ms
        return data


@dataclass
class SearchReport:
    """검색 응답 표준 포맷

    Attributes:
        items: 결과 목록 (길이 <= limit)
        mode_used: 요청된 모드
        engines_used: 실제 호출 순서대로의 엔진 태그
        escalated: Deep 엔진으로 승격했는지 여부
        diagnostics: 엔진 태그 → 지표
        escalation_reasons: 승격 사유 코드 (auto 모드에서만)
        merge_priority: 병합 시 사용한 우선순위 (병합이 없으면 None)
    """

    items: List[SearchItem] = field(default_factory=list)
    mode_used: SearchMode = SearchMode.AUTO
    engines_used: List[EngineName] = field(default_factory=list)
    escalated: bool = False
    diagnostics: Dict[EngineName, EngineDiagnostics] = field(default_factory=dict)
    escalation_reasons: List[str] = field(default_factory=list)
    merge_priority: Optional[str] = None

    @classmethod
    def empty(cls, mode: SearchMode) -> "SearchReport":
        """엔진을 호출하지 않은 빈 결과 (공백 쿼리 등)"""
        return cls(items=[], mode_used=mode)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "items": [it.to_dict() for it in self.items],
            "modeUsed": self.mode_used.value,
            "enginesUsed": [e.value for e in self.engines_used],
            "escalated": self.escalated,
            "diagnostics": {k.value: v.to_dict() for k, v in self.diagnostics.items()},
        }
        if self.escalation_reasons:
            data["escalationReasons"] = list(self.escalation_reasons)
        if self.merge_priority:
            data["mergePriority"] = self.merge_priority
        return data
