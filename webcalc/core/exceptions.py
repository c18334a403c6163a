"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


class WebCalcException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 검색 엔진 관련 예외
class EngineException(WebCalcException):
    """검색 엔진(Fast/Deep) 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "ENGINE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "ENGINE_ERROR", details)


class NetworkFailureException(EngineException):
    """타임아웃 또는 비정상 응답(non-2xx)"""
    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Network failure in '{engine}': {reason}"
        super().__init__(message, "NETWORK_FAILURE",
                         details or {"engine": engine, "reason": reason})


class ParseFailureException(EngineException):
    """검색 결과 마크업 파싱 오류"""
    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to parse results from '{engine}': {reason}"
        super().__init__(message, "PARSE_FAILURE",
                         details or {"engine": engine, "reason": reason})


class EngineUnavailableException(EngineException):
    """브라우저 런타임 누락 또는 실행 불가"""
    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Engine '{engine}' is unavailable: {reason}"
        super().__init__(message, "ENGINE_UNAVAILABLE",
                         details or {"engine": engine, "reason": reason})


# 유효성 검증 관련 예외
class ValidationException(WebCalcException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                         details or {"field": field, "reason": reason})


class InvalidURLException(ValidationException):
    """유효하지 않은 URL"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("url", f"{reason} (url: {url})", details)


class MathEvaluationException(ValidationException):
    """수식 평가 실패"""
    def __init__(self, expression: str, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("expression", reason,
                         details or {"expression": expression, "reason": reason})


# 외부 문서 관련 예외
class ExtractionException(WebCalcException):
    """문서 다운로드/본문 추출 실패"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to extract '{url}': {reason}"
        super().__init__(message, "EXTRACTION_FAILED",
                         details or {"url": url, "reason": reason})
