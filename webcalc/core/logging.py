"""로깅 설정"""
import logging
import os
import re
import sys
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from webcalc.core.config import settings


# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"

# 본문 추출/HTTP 라이브러리는 자체 로그가 많아 WARNING 이상만
NOISY_LOGGERS = ("trafilatura", "htmldate", "pdfminer", "curl_cffi")

# URL query 중 값을 가릴 파라미터 이름
SENSITIVE_PARAM_RE = re.compile(
    r"(pass(word)?|pwd|token|secret|api[_-]?key|key|auth|sig(nature)?|session|sid|code)$",
    re.IGNORECASE,
)


def setup_logging() -> logging.Logger:
    """로거 초기화 및 설정"""

    logger = logging.getLogger("webcalc")

    log_level = settings.log_level.upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"
    level = getattr(logging, log_level)
    logger.setLevel(level)

    if not logger.handlers:
        # stdout은 도구 응답 채널로 쓰일 수 있으므로 로그는 stderr로 보냅니다.
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        if IS_PRODUCTION:
            fmt = "%(asctime)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


logger = setup_logging()


def _mask_url(value: str) -> str:
    """URL의 userinfo 제거 + 민감한 query 값 마스킹"""
    try:
        parts = urlsplit(value)
        host = parts.hostname or ""
        port = parts.port
    except ValueError:
        return value

    netloc = f"[{host}]" if ":" in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        if any(SENSITIVE_PARAM_RE.search(k) for k, _ in pairs):
            query = urlencode(
                [(k, "***" if SENSITIVE_PARAM_RE.search(k) else v) for k, v in pairs],
                safe="*",
            )
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """로깅용 문자열 반환 (검색어, URL)

    - http(s) URL: userinfo 제거, token/api_key 등 query 값은 *** 로 대체
    - 검색어: 그대로 (줄바꿈만 공백으로)

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        마스킹/절단된 문자열
    """
    if not value:
        return "[empty]"

    result = value
    if result.lower().startswith(("http://", "https://")):
        result = _mask_url(result)

    # 줄바꿈은 로그 인젝션 방지를 위해 공백으로 치환
    result = result.replace("\r", " ").replace("\n", " ")

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result
