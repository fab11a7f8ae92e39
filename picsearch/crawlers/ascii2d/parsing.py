"""ASCII2D - HTML 파싱 유틸.

네트워크(fetch)와 분리된 순수 파싱 로직입니다. 색상 검색 페이지와 특징(bovw)
검색 페이지는 같은 `.item-box` 구조라 같은 파서를 씁니다.
"""

from __future__ import annotations

import re
from typing import List, Optional

from selectolax.parser import HTMLParser, Node

from picsearch.core.exceptions import ExtractionError
from picsearch.engine.result import AdditionalInfo, EngineName, SearchResult
from picsearch.utils.text import squash_whitespace
from picsearch.utils.url import normalize_url


ASCII2D_URL = "https://ascii2d.net"

CHALLENGE_MARKERS = (
    "Just a moment...",
    "cf-browser-verification",
)

_BOVW_PATTERN = re.compile(r"/search/bovw/([^\"'?#\s<>]+)")


def find_bovw_url(html: str, base_url: str = ASCII2D_URL) -> Optional[str]:
    """색상 검색 결과에 박혀 있는 특징 검색 링크를 찾습니다."""
    if not html:
        return None
    m = _BOVW_PATTERN.search(html)
    if not m:
        return None
    return f"{base_url}/search/bovw/{m.group(1)}"


def _parse_item(item: Node, base_url: str) -> Optional[SearchResult]:
    detail = item.css_first(".detail-box")
    if detail is None:
        return None

    links = detail.css("a")
    # 첫 번째 링크 = 작가, 두 번째 링크 = 원본 + 제목
    if len(links) < 2:
        return None
    author_link, source_link = links[0], links[1]

    url = normalize_url(source_link.attributes.get("href") or "", base_url)

    img = item.css_first("img")
    src = img.attributes.get("src") if img is not None else None
    thumbnail = normalize_url(src, base_url) if src else None

    hash_node = item.css_first(".hash")
    index = squash_whitespace(hash_node.text()) if hash_node is not None else None

    author_href = author_link.attributes.get("href")

    return SearchResult(
        title=squash_whitespace(source_link.text()) or None,
        url=url,
        thumbnail=thumbnail,
        similarity=None,
        source=str(EngineName.ASCII2D),
        index=index or None,
        additional_info=AdditionalInfo(
            author=squash_whitespace(author_link.text()) or None,
            author_url=normalize_url(author_href, base_url) if author_href else None,
        ),
    )


def parse_results(html: str, base_url: str = ASCII2D_URL) -> List[SearchResult]:
    """`.item-box` 목록을 SearchResult로 변환.

    - `.item-box`가 하나도 없으면 결과 페이지가 아니므로 ExtractionError
    - 링크가 부족한 박스(업로드 이미지 자신 등)는 건너뜀
    """
    parser = HTMLParser(html or "")
    items = parser.css(".item-box")
    if not items:
        raise ExtractionError(str(EngineName.ASCII2D), "no .item-box nodes in page")

    results: List[SearchResult] = []
    for item in items:
        parsed = _parse_item(item, base_url)
        if parsed is not None:
            results.append(parsed)
    return results
