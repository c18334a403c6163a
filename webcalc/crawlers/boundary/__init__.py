"""Boundary layer - 네트워크와 분리된 결과 파싱 전략 (export only)."""

from .result_parsing import (
    BING_EXTRACT_SCRIPT,
    BingCardStrategy,
    DdgHtmlStrategy,
    ResultParsingStrategy,
    build_item,
)

__all__ = [
    "BING_EXTRACT_SCRIPT",
    "BingCardStrategy",
    "DdgHtmlStrategy",
    "ResultParsingStrategy",
    "build_item",
]
