"""Engine Protocol - Fast/Deep 검색 엔진 인터페이스"""

from typing import List, Optional, Protocol

from webcalc.engine.budget import Deadline
from webcalc.engine.result import EngineName, SearchItem


class SearchEngine(Protocol):
    """검색 엔진 프로토콜

    Fast(HTTP)/Deep(Playwright) 엔진이 구현해야 할 인터페이스입니다.

    구현 예시:
        class DdgHtmlEngine(SearchEngine):
            name = EngineName.DDG_HTML

            async def search(self, query, num, lang=None, *, deadline=None):
                # HTTP 기반 검색 로직
                ...
    """

    name: EngineName

    async def search(
        self,
        query: str,
        num: int,
        lang: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None,
    ) -> List[SearchItem]:
        """검색 실행

        Args:
            query: 검색어
            num: 최대 결과 수
            lang: 언어 힌트 (예: "en", "vi")
            deadline: 협력적 취소를 위한 마감 시각

        Returns:
            List[SearchItem]: 최대 num개의 결과 (URL은 절대 경로)

        Raises:
            NetworkFailureException: 타임아웃/비정상 응답
            ParseFailureException: 페이지 단위 추출 실패
            EngineUnavailableException: 엔진 런타임 사용 불가
        """
        ...
