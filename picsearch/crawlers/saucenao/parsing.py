"""SauceNAO - JSON 응답 스키마 및 변환

output_type=2 응답을 pydantic 모델로 검증한 뒤 SearchResult로 바꿉니다.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from picsearch.core.exceptions import ExtractionError, UpstreamApiError
from picsearch.engine.result import (
    AdditionalInfo,
    EngineName,
    SearchResult,
    filter_by_similarity,
    normalize_similarity,
)
from picsearch.utils.url import normalize_url


SAUCENAO_URL = "https://saucenao.com/search.php"

_ENGINE = str(EngineName.SAUCENAO)


class ResponseHeader(BaseModel):
    status: int
    message: Optional[str] = None


class ResultHeader(BaseModel):
    similarity: float = 0.0
    thumbnail: Optional[str] = None
    index_id: Optional[int] = None
    index_name: str = _ENGINE

    @field_validator("similarity", mode="before")
    @classmethod
    def parse_similarity(cls, v: Any) -> float:
        """"92.14" 같은 문자열로 내려옴"""
        try:
            return float(v)
        except (TypeError, ValueError):
            return 0.0


class ResultData(BaseModel):
    ext_urls: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    source: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("ext_urls", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v or []


class ResultItem(BaseModel):
    header: ResultHeader
    data: ResultData = Field(default_factory=ResultData)


class SauceNaoResponse(BaseModel):
    header: ResponseHeader
    results: Optional[List[ResultItem]] = None


def parse_response(payload: Any) -> SauceNaoResponse:
    """JSON payload 검증.

    Raises:
        ExtractionError: 스키마와 맞지 않음
        UpstreamApiError: header.status < 0
    """
    try:
        response = SauceNaoResponse.model_validate(payload)
    except ValidationError as e:
        raise ExtractionError(_ENGINE, f"unexpected JSON shape: {e.error_count()} validation errors") from e

    if response.header.status < 0:
        raise UpstreamApiError(_ENGINE, response.header.status, response.header.message)
    return response


def _to_result(item: ResultItem) -> SearchResult:
    urls = list(item.data.ext_urls)
    # 첫 번째 ext_url이 대표 링크, 없으면 source
    url = urls.pop(0) if urls else (item.data.source or "")
    return SearchResult(
        title=item.data.title,
        url=normalize_url(url),
        thumbnail=item.header.thumbnail,
        similarity=normalize_similarity(item.header.similarity),
        source=item.header.index_name,
        index=str(item.header.index_id) if item.header.index_id is not None else None,
        additional_info=AdditionalInfo(
            author=item.data.author_name,
            author_url=item.data.author_url,
            source_url=item.data.source,
            created_at=item.data.created_at,
            ext_urls=tuple(urls),
        ),
    )


def to_results(response: SauceNaoResponse, min_similarity: Optional[float]) -> List[SearchResult]:
    results = [_to_result(item) for item in response.results or []]
    return filter_by_similarity(results, min_similarity)
