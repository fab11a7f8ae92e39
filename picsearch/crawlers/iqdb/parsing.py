"""IQDB - HTML 파싱 유틸.

결과 페이지는 매칭마다 표 하나(`#pages > div > table`)를 씁니다. 첫 번째 표는
업로드한 이미지 자신이라 건너뜁니다. 각 표의 행 순서가 의미를 가집니다:

    0: 링크 + 썸네일
    1: 출처 서비스
    2: 크기 ("500×700 [Safe]")
    3: 유사도 ("95% similarity")
"""

from __future__ import annotations

import re
from typing import List, Optional

from selectolax.parser import HTMLParser, Node

from picsearch.core.exceptions import ExtractionError
from picsearch.engine.result import AdditionalInfo, EngineName, SearchResult, normalize_similarity
from picsearch.utils.text import parse_size, squash_whitespace
from picsearch.utils.url import normalize_url


IQDB_URL = "https://iqdb.org"

NO_MATCH_TEXT = "No relevant matches"

_SIMILARITY_PATTERN = re.compile(r"([\d.]+)\s*%\s*similarity", re.IGNORECASE)


def parse_similarity(text: str) -> Optional[float]:
    """"95% similarity" -> 95.0"""
    if not text:
        return None
    m = _SIMILARITY_PATTERN.search(text)
    if not m:
        return None
    try:
        return normalize_similarity(float(m.group(1)))
    except ValueError:
        return None


def _service_name(row: Node) -> str:
    """아이콘 뒤에 오는 서비스 이름 텍스트만 꺼냅니다."""
    td = row.css_first("td")
    if td is None:
        return ""
    for child in td.iter(include_text=True):
        if child.tag == "-text":
            text = (child.text() or "").strip()
            if text:
                return text
    return squash_whitespace(td.text())


def _cell_text(row: Node) -> str:
    td = row.css_first("td")
    return squash_whitespace(td.text()) if td is not None else ""


def _parse_table(table: Node, position: int, base_url: str) -> Optional[SearchResult]:
    rows = table.css("tr")
    if not rows:
        return None

    th = rows[0].css_first("th")
    header = squash_whitespace(th.text()) if th is not None else None
    if header == NO_MATCH_TEXT:
        return None
    # "Best match" / "Additional match" 같은 머리 행은 버림
    if header is not None:
        rows = rows[1:]
    if len(rows) < 4:
        return None

    link = rows[0].css_first("td > a")
    href = link.attributes.get("href") if link is not None else None
    if not href:
        return None

    img = rows[0].css_first("td > a > img")
    src = img.attributes.get("src") if img is not None else None

    source = _service_name(rows[1])
    size_text = _cell_text(rows[2])

    return SearchResult(
        title=f"[{source}] {size_text}",
        url=normalize_url(href, base_url),
        thumbnail=normalize_url(src, base_url) if src else None,
        similarity=parse_similarity(_cell_text(rows[3])),
        source=str(EngineName.IQDB),
        index=str(position),
        additional_info=AdditionalInfo(
            tags=(source,) if source else (),
            size=parse_size(size_text),
        ),
    )


def parse_results(html: str, base_url: str = IQDB_URL) -> List[SearchResult]:
    """결과 표들을 SearchResult로 변환.

    Raises:
        ExtractionError: `#pages` 컨테이너 자체가 없을 때
    """
    parser = HTMLParser(html or "")
    if parser.css_first("#pages") is None:
        raise ExtractionError(str(EngineName.IQDB), "#pages container not found")

    tables = parser.css("#pages > div > table")
    results: List[SearchResult] = []
    for table in tables[1:]:
        parsed = _parse_table(table, len(results), base_url)
        if parsed is not None:
            results.append(parsed)
    return results
