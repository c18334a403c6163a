"""요청 스키마 검증 테스트"""

import pytest
from pydantic import ValidationError

from webcalc.schemas.tool_schema import FetchRequest, MathRequest, SearchData, SearchRequest, WikiRequest


class TestSearchRequest:
    def test_defaults(self):
        req = SearchRequest(q="python")
        assert req.limit == 10
        assert req.mode == "auto"
        assert req.lang is None

    @pytest.mark.parametrize("q", ["", "   "])
    def test_blank_query_is_accepted(self, q):
        assert SearchRequest(q=q).q == ""

    def test_control_characters_are_removed(self):
        assert SearchRequest(q="python\x00 asyncio\n").q == "python asyncio"

    @pytest.mark.parametrize("limit", [0, 51])
    def test_limit_range(self, limit):
        with pytest.raises(ValidationError):
            SearchRequest(q="python", limit=limit)

    def test_lang_is_checked(self):
        assert SearchRequest(q="python", lang=" vi ").lang == "vi"
        assert SearchRequest(q="python", lang="").lang is None
        with pytest.raises(ValidationError):
            SearchRequest(q="python", lang="en;drop")


def test_fetch_request_requires_http_url():
    assert FetchRequest(url=" https://example.org ").url == "https://example.org"
    with pytest.raises(ValidationError):
        FetchRequest(url="file:///etc/passwd")


def test_math_request_defaults():
    req = MathRequest(expression="1+1")
    assert req.mode == "BigNumber"
    assert req.precision == 64


def test_wiki_title_must_not_be_blank():
    with pytest.raises(ValidationError):
        WikiRequest(title="   ")


def test_search_data_accepts_report_keys():
    data = SearchData.model_validate(
        {
            "items": [],
            "modeUsed": "fast",
            "enginesUsed": ["ddg_html"],
            "escalated": False,
            "diagnostics": {"ddg_html": {"elapsed_ms": 12.5, "count": 0, "degraded": False}},
        }
    )
    assert data.mode_used == "fast"
    assert data.model_dump(by_alias=True)["enginesUsed"] == ["ddg_html"]
