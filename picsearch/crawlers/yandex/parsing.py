"""Yandex - CBIR 결과 파싱

결과 목록은 HTML 마크업이 아니라 `div.Root[id^="CbirSites_infinite"]`의
`data-state` 속성(JSON)에 들어 있습니다.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from selectolax.parser import HTMLParser

from picsearch.core.exceptions import ExtractionError
from picsearch.engine.result import AdditionalInfo, EngineName, SearchResult
from picsearch.utils.url import normalize_url


YANDEX_URL = "https://yandex.com"
SEARCH_PATH = "/images/search"

MAINTENANCE_MARKERS = ("The service is under construction",)
CAPTCHA_URL_MARKER = "showcaptcha"

_STATE_SELECTOR = 'div.Root[id^="CbirSites_infinite"]'

_ENGINE = str(EngineName.YANDEX)


def extract_state(html: str) -> Dict[str, Any]:
    """data-state JSON 추출.

    Raises:
        ExtractionError: 컨테이너가 없거나 JSON이 깨짐
    """
    parser = HTMLParser(html or "")
    node = parser.css_first(_STATE_SELECTOR)
    if node is None:
        raise ExtractionError(_ENGINE, "CbirSites container not found")

    raw = node.attributes.get("data-state")
    if not raw:
        raise ExtractionError(_ENGINE, "CbirSites container has no data-state")

    try:
        state = json.loads(raw)
    except ValueError as e:
        raise ExtractionError(_ENGINE, f"invalid data-state JSON: {e}") from e

    if not isinstance(state, dict):
        raise ExtractionError(_ENGINE, "data-state is not a JSON object")
    return state


def _dimension(value: Any) -> Optional[int]:
    """JSON 정수 (1920, 1920.0). bool은 제외"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _original_size(site: Dict[str, Any]) -> Optional[Tuple[int, int]]:
    image = site.get("originalImage")
    if not isinstance(image, dict):
        return None
    width, height = _dimension(image.get("width")), _dimension(image.get("height"))
    if width is None or height is None:
        return None
    return width, height


def _parse_site(site: Dict[str, Any], index: int) -> Optional[SearchResult]:
    url = site.get("url") or ""
    if not url:
        return None

    domain = site.get("domain") or ""
    title = site.get("title") or ""
    size = _original_size(site)
    size_text = f"{size[0]}x{size[1]}" if size else ""

    thumb = site.get("thumb")
    thumb_url = thumb.get("url") if isinstance(thumb, dict) else None

    return SearchResult(
        title=f"[{domain}] {title} - {size_text}",
        url=normalize_url(url),
        thumbnail=normalize_url(thumb_url) if thumb_url else None,
        similarity=None,
        source=_ENGINE,
        index=str(index),
        additional_info=AdditionalInfo(
            source_url=f"https://{domain}" if domain else None,
            size=size,
        ),
    )


def parse_results(html: str) -> List[SearchResult]:
    """`sites[]` → SearchResult (url이 빈 항목은 건너뜀, index는 원래 위치)"""
    sites = extract_state(html).get("sites") or []

    results: List[SearchResult] = []
    for index, site in enumerate(sites):
        if not isinstance(site, dict):
            continue
        parsed = _parse_site(site, index)
        if parsed is not None:
            results.append(parsed)
    return results
