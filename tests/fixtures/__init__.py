"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 dict/list/primitive)
- 엔진/네트워크 의존 없음
- HTML 픽스처는 같은 디렉터리의 *.html 파일
"""

from .api_payloads import API_PAYLOADS
from .wiki_payloads import WIKI_SUMMARY_PAYLOAD

__all__ = [
    "API_PAYLOADS",
    "WIKI_SUMMARY_PAYLOAD",
]
