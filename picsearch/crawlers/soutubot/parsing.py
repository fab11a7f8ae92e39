"""Soutubot - API 키 생성 및 JSON 응답 변환

x-api-key는 현재 UNIX 시각과 User-Agent 길이로 만드는 시간 기반 토큰입니다.
업스트림이 같은 계산으로 검증하므로 공식을 그대로 재현해야 합니다.
"""

from __future__ import annotations

import base64
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from picsearch.core.exceptions import ExtractionError, UpstreamApiError
from picsearch.engine.result import (
    AdditionalInfo,
    EngineName,
    SearchResult,
    filter_by_similarity,
    normalize_similarity,
)


SOUTUBOT_URL = "https://soutubot.moe"

API_KEY_OFFSET = 4746193387776

_ENGINE = str(EngineName.SOUTUBOT)


def compute_api_key(now: float, user_agent: str) -> str:
    """시간 기반 x-api-key 생성 (순수 함수).

    1. t = now를 반올림 (.5는 올림)
    2. m = t^2 + len(ua)^2 + 4746193387776
    3. 100 단위로 내림
    4. 10진 문자열을 base64 인코딩, 끝의 '=' 제거 후 뒤집기

    Args:
        now: UNIX 시각 (초, 소수 허용)
        user_agent: 요청에 실제로 보내는 User-Agent

    Returns:
        x-api-key 헤더 값
    """
    t = int(math.floor(now + 0.5))
    m = t * t + len(user_agent) ** 2 + API_KEY_OFFSET
    m -= m % 100
    encoded = base64.b64encode(str(m).encode("ascii")).decode("ascii")
    return encoded.rstrip("=")[::-1]


class SoutubotItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    similarity: float = 0.0
    title: str = ""
    preview_image_url: str = Field("", alias="previewImageUrl")
    source: str = ""
    language: str = ""
    subject_path: str = Field("", alias="subjectPath")
    page_path: Optional[str] = Field(None, alias="pagePath")


class SoutubotResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: int = 0
    message: str = ""
    data: List[SoutubotItem] = Field(default_factory=list)
    execution_time: float = Field(0.0, alias="executionTime")
    image_url: str = Field("", alias="imageUrl")
    search_option: str = Field("", alias="searchOption")
    id: str = ""


def parse_response(payload: Any) -> SoutubotResponse:
    """JSON payload 검증.

    Raises:
        ExtractionError: 스키마와 맞지 않음
        UpstreamApiError: code < 0
    """
    try:
        response = SoutubotResponse.model_validate(payload)
    except ValidationError as e:
        raise ExtractionError(_ENGINE, f"unexpected JSON shape: {e.error_count()} validation errors") from e

    if response.code < 0:
        raise UpstreamApiError(_ENGINE, response.code, response.message)
    return response


def results_page_url(response: SoutubotResponse, base_url: str = SOUTUBOT_URL) -> str:
    return f"{base_url}/results/{response.id}" if response.id else ""


def _to_result(item: SoutubotItem) -> SearchResult:
    ext_urls: tuple[str, ...] = ()
    if item.source == "nhentai":
        url = f"https://nhentai.net{item.subject_path}"
    else:
        # e-hentai 계열은 exhentai 미러를 함께 제공
        url = f"https://e-hentai.org{item.subject_path}"
        ext_urls = (f"https://exhentai.org{item.subject_path}",)

    tags = (item.language,) if item.language else ()
    return SearchResult(
        title=item.title or None,
        url=url,
        thumbnail=item.preview_image_url or None,
        similarity=normalize_similarity(item.similarity),
        source=item.source or _ENGINE,
        index=None,
        additional_info=AdditionalInfo(tags=tags, ext_urls=ext_urls),
    )


def to_results(response: SoutubotResponse, min_similarity: Optional[float]) -> List[SearchResult]:
    return filter_by_similarity([_to_result(item) for item in response.data], min_similarity)
