"""ExtractService 테스트 (HTTP/추출기 Mock)"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from webcalc.core.exceptions import ExtractionException, InvalidURLException
from webcalc.crawlers.http_client import HttpResponse
from webcalc.services.extract_service import EMPTY_SUMMARY, ExtractService, extract_html, lead_summary

ARTICLE_HTML = """
<html lang="vi">
<head><title>Tin tức | Example</title></head>
<body>
  <nav>Menu</nav>
  <article><h1>Tin tức</h1><p>Đoạn văn đầu tiên.</p></article>
</body>
</html>
"""


def make_client(response=None, error=None) -> MagicMock:
    client = MagicMock()
    client.fetch = AsyncMock(return_value=response, side_effect=error)
    return client


class TestFetchAndExtract:
    @pytest.mark.asyncio
    async def test_html_uses_trafilatura_with_metadata(self):
        client = make_client(
            HttpResponse(
                status=200,
                url="https://example.org/news/1",
                text=ARTICLE_HTML,
                headers={"content-type": "text/html; charset=utf-8"},
            )
        )
        meta = SimpleNamespace(title="Tin tức", author="Nguyễn Văn A", sitename="Example")
        with patch("webcalc.services.extract_service.trafilatura.extract", return_value="Đoạn văn đầu tiên.") as extract, \
             patch("webcalc.services.extract_service.trafilatura.extract_metadata", return_value=meta):
            doc = await ExtractService(http_client=client).fetch_and_extract("https://example.org/news/1", "vi")

        assert doc.text == "Đoạn văn đầu tiên."
        assert doc.title == "Tin tức"
        assert doc.byline == "Nguyễn Văn A"
        assert doc.site_name == "Example"
        assert doc.lang == "vi"
        assert doc.content_type == "text/html"
        assert extract.call_args.kwargs["url"] == "https://example.org/news/1"
        assert client.fetch.await_args.kwargs["headers"]["Accept-Language"].startswith("vi")

    @pytest.mark.asyncio
    async def test_pdf_branch(self):
        client = make_client(
            HttpResponse(
                status=200,
                url="https://example.org/paper.pdf",
                content=b"%PDF-1.4 fake",
                headers={"content-type": "application/pdf"},
            )
        )
        page1, page2 = MagicMock(), MagicMock()
        page1.extract_text.return_value = "Page one"
        page2.extract_text.return_value = None
        pdf = MagicMock()
        pdf.pages = [page1, page2]
        pdf.metadata = {"Title": "A Paper"}
        pdf.__enter__.return_value = pdf

        with patch("webcalc.services.extract_service.pdfplumber.open", return_value=pdf) as pdf_open:
            doc = await ExtractService(http_client=client).fetch_and_extract("https://example.org/paper.pdf")

        assert doc.text == "Page one\n"
        assert doc.title == "A Paper"
        assert doc.length == 2
        assert doc.content_type == "application/pdf"
        assert pdf_open.call_args.args[0].read() == b"%PDF-1.4 fake"

    @pytest.mark.asyncio
    async def test_non_2xx_is_extraction_failure(self):
        client = make_client(HttpResponse(status=404, url="https://example.org/missing"))

        with pytest.raises(ExtractionException) as exc_info:
            await ExtractService(http_client=client).fetch_and_extract("https://example.org/missing")

        assert exc_info.value.details["status"] == 404

    @pytest.mark.asyncio
    async def test_network_error_is_extraction_failure(self):
        client = make_client(error=TimeoutError("timed out"))

        with pytest.raises(ExtractionException):
            await ExtractService(http_client=client).fetch_and_extract("https://example.org/slow")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["ftp://example.org/a", "/relative", "", "javascript:alert(1)"])
    async def test_invalid_url(self, url):
        client = make_client()

        with pytest.raises(InvalidURLException):
            await ExtractService(http_client=client).fetch_and_extract(url)

        client.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_summarize_trims_at_sentence_boundary(self):
        client = make_client(HttpResponse(status=200, url="https://example.org/a", text=ARTICLE_HTML))
        text = "First sentence is here. Second sentence follows. Third one is cut off somewhere"
        with patch("webcalc.services.extract_service.trafilatura.extract", return_value=text), \
             patch("webcalc.services.extract_service.trafilatura.extract_metadata", return_value=None):
            summary = await ExtractService(http_client=client).summarize("https://example.org/a", max_chars=60)

        assert summary["summary"] == "First sentence is here. Second sentence follows."
        assert summary["url"] == "https://example.org/a"


class TestExtractHtmlFallback:
    def test_falls_back_to_title_and_body(self):
        with patch("webcalc.services.extract_service.trafilatura.extract", return_value=None):
            doc = extract_html(ARTICLE_HTML, "https://example.org/news/1")

        assert doc.title == "Tin tức | Example"
        assert "Đoạn văn đầu tiên." in doc.text
        assert doc.lang == "vi"
        assert doc.byline is None


class TestLeadSummary:
    def test_short_text_is_returned_whole(self):
        assert lead_summary("  Short   text. ", 100) == "Short text."

    def test_empty_text_placeholder(self):
        assert lead_summary("", 100) == EMPTY_SUMMARY
        assert lead_summary("   \n ", 100) == EMPTY_SUMMARY

    def test_hard_cut_without_boundary(self):
        text = "word " * 100
        out = lead_summary(text, 50)
        assert out.endswith("...")
        assert len(out) <= 53
