"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 공통 네트워크 프로파일
    # User-Agent와 Accept-Language는 항상 같은 "브라우저 프로파일"로 맞춰 보냅니다.
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    lang_default: str = "en"

    # 단일 네트워크 호출 상한 (ms)
    http_timeout: int = 15000
    http_impersonate: str = "chrome110"
    http_max_clients: int = 20

    # 2단 검색 (Fast: DDG HTML → Deep: Bing/Playwright)
    # - fast_time_budget_ms: Fast 엔진 전체 예산. http_timeout과 비교해 작은 값이 적용됩니다.
    # - max_results: limit 미지정 시 기본 결과 수
    # - search_max_results: 허용되는 limit 상한
    fast_time_budget_ms: int = 1800
    max_results: int = 5
    search_max_results: int = 50
    deep_settle_ms: int = 200
    search_merge_priority: str = "fast_first"

    # Playwright 브라우저
    browser_headless: bool = True
    browser_launch_timeout_s: float = 25.0
    browser_viewport_width: int = 1366
    browser_viewport_height: int = 768

    # 추출/요약
    summary_max_chars: int = 2000

    # API
    api_title: str = "webcalc"
    api_version: str = "0.2.0"
    api_description: str = "웹 검색(Fast/Deep), 페이지 추출, 위키 요약, 고정밀 계산 도구"

    # 로깅
    log_level: str = "INFO"

    @field_validator("http_timeout", "fast_time_budget_ms")
    @classmethod
    def validate_timeouts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("max_results", "search_max_results")
    @classmethod
    def validate_result_counts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("result counts must be positive")
        return v

    @field_validator("deep_settle_ms")
    @classmethod
    def validate_settle(cls, v: int) -> int:
        if v < 0:
            raise ValueError("deep_settle_ms must be >= 0")
        return v

    @field_validator("search_merge_priority")
    @classmethod
    def validate_merge_priority(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("fast_first", "deep_first"):
            raise ValueError("search_merge_priority must be 'fast_first' or 'deep_first'")
        return v

    @field_validator("lang_default")
    @classmethod
    def validate_lang_default(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("lang_default must not be empty")
        return v.strip()

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
