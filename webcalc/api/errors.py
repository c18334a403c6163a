"""도메인 예외 → HTTP 에러 응답 매핑"""
from fastapi import HTTPException

from webcalc.core.exceptions import (
    EngineUnavailableException,
    ExtractionException,
    NetworkFailureException,
    ParseFailureException,
    ValidationException,
    WebCalcException,
)

_STATUS_BY_EXCEPTION = (
    (EngineUnavailableException, 503),
    (NetworkFailureException, 502),
    (ParseFailureException, 502),
    (ExtractionException, 502),
    (ValidationException, 400),
)


def error_payload(error_code: str, message: str) -> dict:
    return {"status": "error", "error_code": error_code, "message": message}


def to_http_exception(e: WebCalcException) -> HTTPException:
    status_code = 500
    for exc_type, code in _STATUS_BY_EXCEPTION:
        if isinstance(e, exc_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail=error_payload(e.error_code, e.message))
