"""Google 이미지 검색 - HTML 파싱 유틸.

두 단계로 읽습니다.
1. `<script>` 전체에서 (dimg_* id -> base64 썸네일) 쌍을 정규식으로 수집
2. `#search .g` 결과 블록에서 제목/링크를 읽고 img id로 썸네일을 붙임

페이지 링크(`a[aria-label^="Page"]`)는 페이지네이션 상태에 쓰입니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

from selectolax.parser import HTMLParser

from picsearch.core.exceptions import ExtractionError
from picsearch.engine.result import AdditionalInfo, EngineName, SearchResult
from picsearch.utils.text import squash_whitespace
from picsearch.utils.url import normalize_url


GOOGLE_URL = "https://www.google.com"

CHALLENGE_MARKERS = (
    "Our systems have detected unusual traffic",
)

_THUMBNAIL_PATTERN = re.compile(r"data:image/(?:jpeg|jpg|png|gif|webp);base64,[^'\"]+")
_IMAGE_ID_PATTERN = re.compile(r"dimg_[^'\"]+")
_PAGE_LABEL_PATTERN = re.compile(r"Page\s+(\d+)\s*$")


@dataclass
class ParsedPage:
    results: List[SearchResult] = field(default_factory=list)
    page_urls: Dict[int, str] = field(default_factory=dict)


def extract_thumbnails(parser: HTMLParser) -> Dict[str, str]:
    """스크립트 블록에서 id -> data URI 썸네일 맵을 만듭니다."""
    thumbnails: Dict[str, str] = {}
    for script in parser.css("script"):
        text = script.text() or ""
        m = _THUMBNAIL_PATTERN.search(text)
        if not m:
            continue
        data_uri = m.group(0).replace(r"\x3d", "=")
        for image_id in _IMAGE_ID_PATTERN.findall(text):
            thumbnails[image_id] = data_uri
    return thumbnails


def extract_page_urls(parser: HTMLParser, base_url: str = GOOGLE_URL) -> Dict[int, str]:
    """페이지 번호 -> 절대 URL.

    번호는 `aria-label="Page N"`에서 읽습니다. 2페이지부터는 "Page 1" 링크도
    나오므로 발견 순서가 아닌 번호로 위치를 정합니다.
    """
    urls: Dict[int, str] = {}
    for anchor in parser.css('a[aria-label^="Page"]'):
        href = anchor.attributes.get("href")
        m = _PAGE_LABEL_PATTERN.match(anchor.attributes.get("aria-label") or "")
        if href and m:
            urls.setdefault(int(m.group(1)), normalize_url(href, base_url))
    return urls


def parse_page(html: str, base_url: str = GOOGLE_URL) -> ParsedPage:
    """결과 페이지 하나를 파싱.

    Raises:
        ExtractionError: `#search` 컨테이너가 없을 때 (결과가 0건인 페이지에도 존재함)
    """
    parser = HTMLParser(html or "")
    if parser.css_first("#search") is None:
        raise ExtractionError(str(EngineName.GOOGLE), "#search container not found")

    thumbnails = extract_thumbnails(parser)

    results: List[SearchResult] = []
    for index, block in enumerate(parser.css("#search .g")):
        anchor = block.css_first("a")
        href = anchor.attributes.get("href") if anchor is not None else None
        if not href:
            continue

        h3 = block.css_first("h3")
        img = block.css_first("img[id^='dimg_']")
        image_id = img.attributes.get("id") if img is not None else None

        results.append(
            SearchResult(
                title=squash_whitespace(h3.text()) if h3 is not None else None,
                url=normalize_url(href, base_url),
                thumbnail=thumbnails.get(image_id) if image_id else None,
                similarity=None,
                source=str(EngineName.GOOGLE),
                index=str(index),
                additional_info=AdditionalInfo(),
            )
        )

    return ParsedPage(results=results, page_urls=extract_page_urls(parser, base_url))
