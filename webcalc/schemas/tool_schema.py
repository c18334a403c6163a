"""Pydantic 스키마 정의 (도구 요청/응답)"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_http_url(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL은 http:// 또는 https://로 시작해야 합니다")
    return v


def _validate_lang(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not all(ch.isalnum() or ch == "-" for ch in v):
        raise ValueError("언어 코드는 영문/숫자/하이픈만 허용됩니다")
    return v


class SearchRequest(BaseModel):
    """웹 검색 요청"""
    q: str = Field(..., max_length=500, description="검색어 (공백만 있으면 빈 결과)")
    limit: int = Field(10, ge=1, le=50, description="최대 결과 수 (1~50)")
    lang: Optional[str] = Field(None, max_length=16, description="언어 힌트 (예: en, vi)")
    mode: Literal["fast", "deep", "auto"] = Field("auto", description="fast | deep | auto")

    @field_validator("q")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """제어 문자 제거 (공백 쿼리는 빈 결과로 처리)"""
        return "".join(ch for ch in v if ch.isprintable()).strip()

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: Optional[str]) -> Optional[str]:
        return _validate_lang(v)


class SearchItemModel(BaseModel):
    title: str
    url: str
    snippet: Optional[str] = None
    source: str


class EngineDiagnosticsModel(BaseModel):
    elapsed_ms: float = Field(..., ge=0, description="소요 시간 (밀리초)")
    count: int = Field(..., ge=0, description="결과 수")
    degraded: bool = False
    error_code: Optional[str] = None
    error: Optional[str] = None
    time_budget_ms: Optional[int] = None


class SearchData(BaseModel):
    """검색 결과 + 진단 정보"""
    model_config = ConfigDict(populate_by_name=True)

    items: List[SearchItemModel]
    mode_used: str = Field(..., alias="modeUsed")
    engines_used: List[str] = Field(..., alias="enginesUsed")
    escalated: bool
    diagnostics: Dict[str, EngineDiagnosticsModel]
    escalation_reasons: Optional[List[str]] = Field(None, alias="escalationReasons")
    merge_priority: Optional[str] = Field(None, alias="mergePriority")


class SearchResponse(BaseModel):
    status: str = Field("success", description="success or error")
    data: SearchData


class FetchRequest(BaseModel):
    """페이지 본문 추출 요청"""
    url: str = Field(..., min_length=1, max_length=2048)
    lang: Optional[str] = Field(None, max_length=16)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """URL 검증"""
        return _validate_http_url(v)

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: Optional[str]) -> Optional[str]:
        return _validate_lang(v)


class DocumentData(BaseModel):
    url: str
    text: str
    title: Optional[str] = None
    byline: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    length: Optional[int] = None
    content_type: str


class FetchResponse(BaseModel):
    status: str = "success"
    data: DocumentData


class SummarizeRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2048)
    max_chars: int = Field(2000, ge=100, le=20000, description="요약 최대 길이")
    lang: Optional[str] = Field(None, max_length=16)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """URL 검증"""
        return _validate_http_url(v)

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: Optional[str]) -> Optional[str]:
        return _validate_lang(v)


class SummaryData(BaseModel):
    url: str
    title: Optional[str] = None
    summary: str


class SummarizeResponse(BaseModel):
    status: str = "success"
    data: SummaryData


class MathRequest(BaseModel):
    """수식 계산 요청"""
    expression: str = Field(..., min_length=1, max_length=1000, description="수식 (예: 0.1 + 0.2)")
    mode: Literal["number", "BigNumber", "Fraction"] = Field("BigNumber")
    precision: int = Field(64, ge=16, le=256, description="BigNumber 유효 자릿수")


class MathData(BaseModel):
    mode: str
    result: str
    value_type: str


class MathResponse(BaseModel):
    status: str = "success"
    data: MathData


class WikiRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300, description="문서 제목")
    lang: Optional[str] = Field(None, max_length=16)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("제목은 공백만으로 구성될 수 없습니다")
        return v.strip()

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: Optional[str]) -> Optional[str]:
        return _validate_lang(v)


class WikiData(BaseModel):
    lang: str
    title: str
    url: str
    description: Optional[str] = None
    extract: Optional[str] = None
    thumbnail_url: Optional[str] = None


class WikiResponse(BaseModel):
    status: str = "success"
    data: WikiData


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    browser_running: bool = False
