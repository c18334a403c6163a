"""Search engine adapters (HTTP fast path + Playwright deep path).

공개 API는 이 파일에서만 export합니다.
"""

from .executor import SearchEngine
from .fastpath_executor import DdgHtmlEngine
from .slowpath_executor import BingPlaywrightEngine

__all__ = [
    "SearchEngine",
    "DdgHtmlEngine",
    "BingPlaywrightEngine",
]
