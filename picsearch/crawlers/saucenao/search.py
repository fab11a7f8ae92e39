"""SauceNAO 검색 (JSON API)

최소 유사도 기본값이 진입점마다 다릅니다. options를 넘기지 않았거나
options.min_similarity가 None이면:
- URL 검색: 0.0
- 업로드 검색: 80.0 (서버 minsim 파라미터와 로컬 필터 모두)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from picsearch.core.config import settings
from picsearch.core.exceptions import ExtractionError
from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import HttpResponse, MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName, SearchResult
from picsearch.utils.url import url_encode

from .parsing import SAUCENAO_URL, parse_response, to_results


URL_DEFAULT_MIN_SIMILARITY = 0.0
UPLOAD_DEFAULT_MIN_SIMILARITY = 80.0

NUM_RESULTS = 16
ALL_INDEXES_MASK = 999

_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://saucenao.com/",
}


def resolve_min_similarity(options: Optional[SearchOptions], default: float) -> float:
    if options is None or options.min_similarity is None:
        return default
    return options.min_similarity


class SauceNao(ImageSearch):
    """SauceNAO (인덱스별 결과, 유사도 % 제공)"""

    engine_name = EngineName.SAUCENAO

    def __init__(self, api_key: Optional[str] = None, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.api_key = api_key if api_key is not None else settings.saucenao_api_key

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(base_url=SAUCENAO_URL, headers=dict(_BROWSER_HEADERS))

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        min_similarity = resolve_min_similarity(options, URL_DEFAULT_MIN_SIMILARITY)
        options = self._options(options)
        params: Dict[str, Any] = {
            "url": url,
            "output_type": 2,
            "numres": NUM_RESULTS,
        }
        if self.api_key:
            params["api_key"] = self.api_key
        logger.info(f"[SAUCENAO] search_by_url: {sanitize_for_log(url)} (api_key={'set' if self.api_key else 'none'})")

        async with self._open_client(options) as client:
            resp = await client.get(self.config.base_url, params=params)

        results = self._parse(resp, min_similarity)
        return f"{self.config.base_url}?url={url_encode(url)}", results

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        min_similarity = resolve_min_similarity(options, UPLOAD_DEFAULT_MIN_SIMILARITY)
        options = self._options(options)
        fields = [
            MultipartField("output_type", "2"),
            MultipartField("numres", str(NUM_RESULTS)),
            MultipartField("api_key", self.api_key or ""),
            MultipartField("dbmask", str(ALL_INDEXES_MASK)),
            MultipartField("minsim", str(min_similarity)),
            MultipartField("file", data, filename="image.png", content_type="image/png"),
        ]
        logger.info(f"[SAUCENAO] search_by_bytes: {len(data)} bytes (minsim={min_similarity})")

        async with self._open_client(options) as client:
            resp = await client.post(self.config.base_url, multipart=fields)

        return "", self._parse(resp, min_similarity)

    def _parse(self, resp: HttpResponse, min_similarity: float) -> List[SearchResult]:
        raise_for_status(resp, self.name())
        try:
            payload = resp.json()
        except ValueError as e:
            raise ExtractionError(self.name(), f"response is not JSON: {e}") from e

        response = parse_response(payload)
        results = to_results(response, min_similarity)
        logger.info(f"[SAUCENAO] {len(response.results or [])} results, {len(results)} >= {min_similarity}%")
        return results
