"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 엔진/HTTP 클라이언트 주입
- 고정 HTML 픽스처 로드

금지:
- 실제 네트워크/브라우저 호출
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def ddg_html() -> str:
    return load_fixture("ddg_results.html")


@pytest.fixture
def bing_html() -> str:
    return load_fixture("bing_results.html")


def make_item(url: str, title: str = "Example result title", source=None):
    from webcalc.engine.result import EngineName, SearchItem

    return SearchItem(title=title, url=url, snippet=None, source=source or EngineName.DDG_HTML)


def distinct_items(n: int, source=None) -> list:
    return [make_item(f"https://site{i}.example.org/page", f"Result number {i}", source) for i in range(n)]


class FakeEngine:
    """오케스트레이터 Unit 테스트용 엔진

    - 고정 결과 또는 예외를 반환
    - 호출 인자를 기록
    """

    def __init__(self, name, items: Optional[List] = None, error: Optional[Exception] = None):
        self.name = name
        self.items = items or []
        self.error = error
        self.calls: list = []

    async def search(self, query, num, lang=None, *, deadline=None):
        self.calls.append({"query": query, "num": num, "lang": lang, "deadline": deadline})
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def fake_fast():
    from webcalc.engine.result import EngineName

    return FakeEngine(EngineName.DDG_HTML)


@pytest.fixture
def fake_deep():
    from webcalc.engine.result import EngineName

    return FakeEngine(EngineName.BING_PW)
