"""IQDB 검색 (multipart POST 한 번)"""

from __future__ import annotations

from typing import List, Optional

from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName, SearchResult, filter_by_similarity
from picsearch.utils.url import url_encode

from .parsing import IQDB_URL, parse_results


class Iqdb(ImageSearch):
    """IQDB (표 기반 결과, 유사도 % 제공)"""

    engine_name = EngineName.IQDB

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(base_url=IQDB_URL)

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[IQDB] search_by_url: {sanitize_for_log(url)}")
        results = await self._post(options, [MultipartField("url", url)])
        return f"{self.config.base_url}/?url={url_encode(url)}", results

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[IQDB] search_by_bytes: {len(data)} bytes")
        part = MultipartField("file", data, filename="image.jpg", content_type="image/jpeg")
        results = await self._post(options, [part])
        return "", results

    async def _post(self, options: SearchOptions, fields: List[MultipartField]) -> List[SearchResult]:
        async with self._open_client(options) as client:
            resp = await client.post(f"{self.config.base_url}/", multipart=fields)
        raise_for_status(resp, self.name())

        results = parse_results(resp.text, self.config.base_url)
        filtered = filter_by_similarity(results, options.min_similarity)
        logger.info(f"[IQDB] Parsed {len(results)} results ({len(filtered)} after similarity filter)")
        return filtered
