"""검색 결과 마크업 파싱 전략.

네트워크(fetch)/브라우저와 분리된 순수 파싱 로직입니다.
서드파티 마크업은 수시로 바뀌므로 엔진별 셀렉터를 버전이 붙은 전략 객체로
격리하고, 테스트에서는 고정 HTML 픽스처로만 검증합니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from selectolax.parser import HTMLParser, Node

from webcalc.core.logging import logger
from webcalc.engine.result import EngineName, SearchItem
from webcalc.utils.url_utils import resolve_href, unwrap_redirect


_WS_RE = re.compile(r"\s+")
_FALLBACK_SNIPPET_MAX = 500


def clean_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return _WS_RE.sub(" ", value).strip()


def build_item(
    title: Optional[str],
    href: Optional[str],
    snippet: Optional[str],
    *,
    base_url: str,
    source: EngineName,
) -> Optional[SearchItem]:
    """(앵커, 요약) 한 쌍을 SearchItem으로 변환

    URL을 해석할 수 없으면 None (해당 항목만 건너뜀).
    """
    absolute = resolve_href(href or "", base_url)
    if absolute is None:
        return None
    url = unwrap_redirect(absolute)
    return SearchItem(
        title=clean_text(title) or url,
        url=url,
        snippet=clean_text(snippet) or None,
        source=source,
    )


def _first(node: Node, selectors: Iterable[str]) -> Optional[Node]:
    for sel in selectors:
        found = node.css_first(sel)
        if found is not None:
            return found
    return None


def _node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return clean_text(node.text(separator=" ", strip=True))


class ResultParsingStrategy(Protocol):
    """엔진별 결과 파싱 전략

    구현 예시:
        class MyEngineStrategy:
            name = "my_engine"
            version = "1"

            def parse(self, html, base_url, limit):
                ...
    """

    name: str
    version: str

    def parse(self, html: str, base_url: str, limit: int) -> List[SearchItem]:
        ...


@dataclass(frozen=True)
class DdgHtmlStrategy:
    """DuckDuckGo HTML(html.duckduckgo.com/html) 결과 파싱

    - 블록: div.result → .web-result (순서대로 폴백)
    - 앵커: a.result__a → 첫 번째 a[href]
    - 요약: .result__snippet → 블록 전체 텍스트
    - 광고 블록(result--ad)은 제외
    """

    name: str = EngineName.DDG_HTML.value
    version: str = "2024.06"
    block_selectors: Sequence[str] = ("div.result", ".web-result")
    anchor_selectors: Sequence[str] = ("a.result__a", "a[href]")
    snippet_selectors: Sequence[str] = (".result__snippet",)
    ad_marker: str = "result--ad"

    def _blocks(self, parser: HTMLParser) -> List[Node]:
        for sel in self.block_selectors:
            nodes = parser.css(sel)
            if nodes:
                return nodes
        return []

    def parse(self, html: str, base_url: str, limit: int) -> List[SearchItem]:
        if not html or limit <= 0:
            return []

        parser = HTMLParser(html)
        items: List[SearchItem] = []
        skipped = 0

        for node in self._blocks(parser)[: limit * 2]:
            classes = node.attributes.get("class") or ""
            if self.ad_marker in classes:
                continue

            anchor = _first(node, self.anchor_selectors)
            if anchor is None:
                continue

            try:
                snippet = _node_text(_first(node, self.snippet_selectors)) or _node_text(node)[:_FALLBACK_SNIPPET_MAX]
                item = build_item(
                    _node_text(anchor),
                    anchor.attributes.get("href"),
                    snippet,
                    base_url=base_url,
                    source=EngineName.DDG_HTML,
                )
            except (ValueError, AttributeError) as e:
                logger.debug(f"[DDG_PARSE] Skipping malformed block: {type(e).__name__}: {e}")
                item = None

            if item is None:
                skipped += 1
                continue

            items.append(item)
            if len(items) >= limit:
                break

        if skipped:
            logger.debug(f"[DDG_PARSE] Skipped {skipped} block(s) with unusable links")
        return items


# 브라우저 안에서 실행되는 추출 루틴. 셀렉터는 인자로 주입합니다.
BING_EXTRACT_SCRIPT = """
({ cfg, limit }) => {
  const pick = (root, selectors) => {
    for (const sel of selectors) {
      const el = root.querySelector(sel);
      if (el) return el;
    }
    return null;
  };
  const out = [];
  for (const card of Array.from(document.querySelectorAll(cfg.card))) {
    const a = pick(card, cfg.anchors);
    if (!a) continue;
    const href = a.getAttribute("href") || "";
    if (!href) continue;
    const sn = pick(card, cfg.snippets);
    out.push({
      title: (a.textContent || "").trim(),
      href: href,
      snippet: ((sn ? sn.textContent : card.textContent) || "").trim(),
    });
    if (out.length >= limit) break;
  }
  return out;
}
"""


@dataclass(frozen=True)
class BingCardStrategy:
    """Bing 결과 카드(li.b_algo) 파싱

    브라우저 안에서는 BING_EXTRACT_SCRIPT로, 서버 측 폴백에서는
    selectolax로 같은 셀렉터를 적용합니다.
    """

    name: str = EngineName.BING_PW.value
    version: str = "2024.06"
    card_selector: str = "li.b_algo"
    anchor_selectors: Sequence[str] = ("h2 a", "a[href]")
    # 1차: .b_caption p / 2차: 레이아웃 변형 대응
    snippet_selectors: Sequence[str] = (".b_caption p", ".b_lineclamp2", ".b_algoSlug")

    @property
    def script(self) -> str:
        return BING_EXTRACT_SCRIPT

    def script_args(self, limit: int) -> Dict[str, Any]:
        return {
            "cfg": {
                "card": self.card_selector,
                "anchors": list(self.anchor_selectors),
                "snippets": list(self.snippet_selectors),
            },
            "limit": limit,
        }

    def to_items(self, raw: Sequence[Mapping[str, Any]], base_url: str, limit: int) -> List[SearchItem]:
        """in-page 추출 결과(dict 목록)를 검증/정규화"""
        items: List[SearchItem] = []
        for entry in raw or []:
            if not isinstance(entry, Mapping):
                continue
            item = build_item(
                entry.get("title"),
                entry.get("href") or entry.get("url"),
                entry.get("snippet"),
                base_url=base_url,
                source=EngineName.BING_PW,
            )
            if item is None:
                continue
            items.append(item)
            if len(items) >= limit:
                break
        return items

    def parse(self, html: str, base_url: str, limit: int) -> List[SearchItem]:
        if not html or limit <= 0:
            return []

        parser = HTMLParser(html)
        raw: List[Dict[str, Any]] = []
        for card in parser.css(self.card_selector):
            anchor = _first(card, self.anchor_selectors)
            if anchor is None:
                continue
            href = anchor.attributes.get("href") or ""
            if not href:
                continue
            snippet_node = _first(card, self.snippet_selectors)
            raw.append(
                {
                    "title": _node_text(anchor),
                    "href": href,
                    "snippet": _node_text(snippet_node) if snippet_node is not None else _node_text(card)[:_FALLBACK_SNIPPET_MAX],
                }
            )
        return self.to_items(raw, base_url, limit)
