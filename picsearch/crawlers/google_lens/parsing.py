"""Google Lens - 프리렌더 스크립트 파싱

Lens 결과 페이지는 데이터를 JSON이 아닌 JS 호출 안에 넣어 보냅니다.

1. 알려진 호출 패턴으로 데이터가 든 `<script>`를 찾음
2. 앞뒤 JS 래퍼를 잘라 JSON 문서로 복원 (실패하면 ExtractionError)
3. 고정된 위치 인덱스 경로로 best match / visual matches를 꺼냄

3단계의 인덱스 경로는 업스트림 버전에 따라 깨지는 부분입니다. 모든 접근은
json_at()을 거쳐 중간에 값이 없으면 None이 되고, 결과는 "매칭 없음"으로 떨어집니다.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

from selectolax.parser import HTMLParser

from picsearch.core.exceptions import ExtractionError
from picsearch.engine.result import (
    AdditionalInfo,
    EngineName,
    SearchResult,
    normalize_similarity,
)
from picsearch.utils.text import clean_price
from picsearch.utils.url import normalize_url


LENS_URL = "https://lens.google.com"

CHALLENGE_MARKERS = (
    "Our systems have detected unusual traffic",
)

_IIFE_MARKER = "(function(){var m="
_CALLBACK_MARKER = "AF_initDataCallback"
_DS1_MARKER = "key: 'ds:1'"

_SCRIPT_MARKERS = (_CALLBACK_MARKER, _IIFE_MARKER, _DS1_MARKER)

_ENGINE = str(EngineName.GOOGLE_LENS)


# 위치 경로 (업스트림 버전 의존)
BEST_MATCH_PATH = (0, 1, 8, 12, 0, 0)
VISUAL_MATCHES_PATH_WITH_MATCH = (1, 1, 8, 8, 0, 12)
VISUAL_MATCHES_PATH = (0, 1, 8, 8, 0, 12)


def json_at(node: Any, *path: Union[int, str]) -> Any:
    """JSON 트리를 따라 내려가며 값을 꺼냅니다. 중간에 없으면 None.

    - 리스트: 정수 인덱스 (범위 밖이면 None)
    - 딕셔너리: 문자열 키, 정수면 str(정수) 키로 조회
    """
    current = node
    for key in path:
        if isinstance(current, list):
            if not isinstance(key, int) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        elif isinstance(current, dict):
            current = current.get(key if isinstance(key, str) else str(key))
        else:
            return None
        if current is None:
            return None
    return current


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


@dataclass
class LensMatch:
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    page_url: Optional[str] = None
    similarity: Optional[float] = None
    source_website: Optional[str] = None
    price: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class LensData:
    best_match: Optional[LensMatch] = None
    similar: List[LensMatch] = field(default_factory=list)


def find_prerender_script(html: str) -> str:
    """데이터가 든 스크립트 본문을 찾습니다."""
    parser = HTMLParser(html or "")
    for script in parser.css("script"):
        text = script.text() or ""
        if any(marker in text for marker in _SCRIPT_MARKERS):
            return text
    raise ExtractionError(_ENGINE, "prerender data script not found")


def _loads_prefix(text: str) -> Any:
    """앞쪽의 JSON 값 하나만 읽고 뒤따르는 JS 문장은 무시합니다 (끝 경계가 없는 형태용)."""
    try:
        value, _ = json.JSONDecoder().raw_decode(text.strip())
    except ValueError as e:
        raise ExtractionError(_ENGINE, f"embedded JSON is invalid: {e}") from e
    return value


def _loads_exact(text: str) -> Any:
    """경계가 확정된 조각 전체가 하나의 JSON 문서여야 합니다."""
    try:
        return json.loads(text)
    except ValueError as e:
        raise ExtractionError(_ENGINE, f"embedded JSON is invalid: {e}") from e


def strip_js_wrapper(script_text: str) -> Tuple[str, bool]:
    """JS 래퍼 앞부분(대입/콜백 호출)과 뒤쪽 window 조작 코드를 잘라냅니다.

    Returns:
        (JSON 텍스트, 끝 경계 확정 여부). 경계가 확정된 조각
        (`data:` ~ `sideChannel:`)은 엄격하게 파싱해야 합니다.

    Raises:
        ExtractionError: 알려진 패턴이 없거나 경계를 찾을 수 없을 때
    """
    start = script_text.find(_IIFE_MARKER)
    if start != -1:
        js_text = script_text[start + len(_IIFE_MARKER):]
        end = js_text.find(";window.")
        if end != -1:
            js_text = js_text[:end]
        return js_text, False

    start = script_text.find(_CALLBACK_MARKER)
    if start != -1:
        js_text = script_text[start:]
        data_start = js_text.find("data:")
        if data_start != -1:
            js_text = js_text[data_start + len("data:"):]
            end = js_text.find("sideChannel:")
            if end == -1:
                raise ExtractionError(_ENGINE, "data block end (sideChannel) not found")
            return js_text[:end].strip().rstrip(","), True
        data_start = js_text.find("[[")
        if data_start != -1:
            return js_text[data_start:], False
        raise ExtractionError(_ENGINE, "data block start not found")

    raise ExtractionError(_ENGINE, "no known data wrapper in script")


def get_prerender_data(html: str) -> Any:
    """HTML에서 프리렌더 JSON 문서를 복원합니다."""
    text, bounded = strip_js_wrapper(find_prerender_script(html))
    return _loads_exact(text) if bounded else _loads_prefix(text)


def _parse_best_match(data: Any) -> Optional[LensMatch]:
    node = json_at(data, *BEST_MATCH_PATH)
    if node is None:
        return None
    title = _str_or_none(json_at(node, 0))
    thumbnail = _str_or_none(json_at(node, 2, 0, 0))
    page_url = _str_or_none(json_at(node, 2, 0, 4))
    if title is None and page_url is None:
        return None
    return LensMatch(title=title, thumbnail=thumbnail, page_url=page_url, similarity=100.0)


def _parse_visual_match(item: Any) -> LensMatch:
    similarity = _number_or_none(json_at(item, 1))
    return LensMatch(
        title=_str_or_none(json_at(item, 3)),
        thumbnail=_str_or_none(json_at(item, 0, 0)),
        page_url=_str_or_none(json_at(item, 5)),
        # 0~1 분수로 내려옴
        similarity=normalize_similarity(similarity, scale=1.0),
        source_website=_str_or_none(json_at(item, 14)),
        price=clean_price(_str_or_none(json_at(item, 0, 7, 1))),
        currency=_str_or_none(json_at(item, 0, 7, 5)),
    )


def parse_prerender_data(data: Any) -> LensData:
    """프리렌더 JSON에서 best match와 visual matches를 꺼냅니다."""
    best = _parse_best_match(data)
    path = VISUAL_MATCHES_PATH_WITH_MATCH if best is not None else VISUAL_MATCHES_PATH
    matches = json_at(data, *path)

    similar: List[LensMatch] = []
    if isinstance(matches, list):
        similar = [_parse_visual_match(item) for item in matches]
    return LensData(best_match=best, similar=similar)


def _to_result(match: LensMatch, with_meta: bool) -> SearchResult:
    tags: List[str] = []
    if match.price:
        tags.append(f"Price: {match.price}")
    if match.currency:
        tags.append(f"Currency: {match.currency}")
    info = AdditionalInfo(
        source_url=match.source_website if with_meta else None,
        tags=tuple(tags),
    )
    return SearchResult(
        title=match.title,
        url=normalize_url(match.page_url or ""),
        thumbnail=match.thumbnail,
        similarity=match.similarity,
        source=_ENGINE,
        index=None,
        additional_info=info,
    )


def to_results(data: LensData) -> List[SearchResult]:
    results: List[SearchResult] = []
    if data.best_match is not None:
        results.append(_to_result(data.best_match, with_meta=False))
    results.extend(_to_result(m, with_meta=True) for m in data.similar)
    return results


def parse_results(html: str) -> List[SearchResult]:
    """Lens 결과 HTML -> SearchResult 목록"""
    return to_results(parse_prerender_data(get_prerender_data(html)))
