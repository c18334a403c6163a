"""도구 서비스 (추출/위키/계산)"""

from .extract_service import ExtractedDocument, ExtractService, lead_summary
from .math_service import MathMode, MathResult, evaluate_expression
from .wikipedia_service import WikipediaService, WikiSummary

__all__ = [
    "ExtractedDocument",
    "ExtractService",
    "lead_summary",
    "MathMode",
    "MathResult",
    "evaluate_expression",
    "WikipediaService",
    "WikiSummary",
]
