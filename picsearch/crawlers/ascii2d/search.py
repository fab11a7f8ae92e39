"""ASCII2D 검색 (curl_cffi + HTML 파싱)

2단계 프로토콜:
1. 홈페이지 GET으로 쿠키를 받고 색상 검색(POST)을 보냄
2. 색상 결과 페이지에 들어 있는 특징(bovw) 검색 링크를 따라가 결과를 이어 붙임
"""

from __future__ import annotations

from typing import List, Optional

from picsearch.core.exceptions import ExtractionError
from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import HttpClient, MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse, detect_challenge
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName

from .parsing import ASCII2D_URL, CHALLENGE_MARKERS, find_bovw_url, parse_results


_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,ja;q=0.8",
    "Cache-Control": "max-age=0",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}


class Ascii2d(ImageSearch):
    """ASCII2D (색상 + 특징 검색)"""

    engine_name = EngineName.ASCII2D

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(base_url=ASCII2D_URL, headers=dict(_BROWSER_HEADERS))

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[ASCII2D] search_by_url: {sanitize_for_log(url)}")
        async with self._open_client(options) as client:
            return await self._search(client, "uri", [MultipartField("uri", url)])

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[ASCII2D] search_by_bytes: {len(data)} bytes")
        part = MultipartField("file", data, filename="image.png", content_type="image/png")
        async with self._open_client(options) as client:
            return await self._search(client, "file", [part])

    async def _search(
        self, client: HttpClient, endpoint: str, fields: List[MultipartField]
    ) -> SearchResponse:
        base_url = self.config.base_url

        # 쿠키 확보
        home = await client.get(base_url)
        raise_for_status(home, self.name())

        resp = await client.post(f"{base_url}/search/{endpoint}", multipart=fields)
        raise_for_status(resp, self.name())
        html = resp.text
        detect_challenge(html, CHALLENGE_MARKERS, self.name())

        results = parse_results(html, base_url)
        logger.info(f"[ASCII2D] Color search: {len(results)} results")

        bovw_url = find_bovw_url(html, base_url)
        if not bovw_url:
            raise ExtractionError(self.name(), "feature search link not found in color results")

        bovw = await client.get(bovw_url)
        raise_for_status(bovw, self.name())
        detect_challenge(bovw.text, CHALLENGE_MARKERS, self.name())

        feature_results = parse_results(bovw.text, base_url)
        logger.info(f"[ASCII2D] Feature search: {len(feature_results)} results")
        results.extend(feature_results)

        return resp.url, results
