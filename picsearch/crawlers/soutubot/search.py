"""Soutubot 검색 (파생 인증 토큰 + multipart 업로드)

바이트 업로드만 네이티브로 지원합니다. URL 검색은 이미지를 내려받은 뒤
바이트 검색으로 넘깁니다.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from picsearch.core.exceptions import ExtractionError
from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName

from .parsing import SOUTUBOT_URL, compute_api_key, parse_response, results_page_url, to_results


SEARCH_FACTOR = "1.2"

_API_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "DNT": "1",
    "X-Requested-With": "XMLHttpRequest",
    "Origin": SOUTUBOT_URL,
    "Referer": f"{SOUTUBOT_URL}/",
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "sec-fetch-site": "same-origin",
    "sec-fetch-mode": "cors",
    "sec-fetch-dest": "empty",
}


class Soutubot(ImageSearch):
    """Soutubot (doujin 검색, 유사도 % 제공)"""

    engine_name = EngineName.SOUTUBOT

    def __init__(self, *args, clock: Callable[[], float] = time.time, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._clock = clock

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(base_url=SOUTUBOT_URL, headers=dict(_API_HEADERS))

    def auth_headers(self) -> Dict[str, str]:
        return {"x-api-key": compute_api_key(self._clock(), self.config.user_agent)}

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[SOUTUBOT] Downloading image: {sanitize_for_log(url)}")
        async with self._open_client(options) as client:
            resp = await client.get(url)
        raise_for_status(resp, self.name())
        return await self.search_by_bytes(resp.content, options)

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[SOUTUBOT] search_by_bytes: {len(data)} bytes")

        fields = [
            MultipartField("factor", SEARCH_FACTOR),
            MultipartField("file", data, filename="image", content_type="application/octet-stream"),
        ]
        async with self._open_client(options) as client:
            resp = await client.post(
                f"{self.config.base_url}/api/search",
                headers=self.auth_headers(),
                multipart=fields,
            )
        raise_for_status(resp, self.name())

        try:
            payload = resp.json()
        except ValueError as e:
            raise ExtractionError(self.name(), f"response is not JSON: {e}") from e

        response = parse_response(payload)
        results = to_results(response, options.min_similarity)
        logger.info(f"[SOUTUBOT] {len(response.data)} results, {len(results)} after similarity filter")
        return results_page_url(response, self.config.base_url), results
