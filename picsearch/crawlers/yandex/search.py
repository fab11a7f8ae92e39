"""Yandex 검색 (CBIR sites 페이지)

세션 쿠키가 없으면 캡차로 튕기는 경우가 많습니다. 쿠키는 Settings.yandex_cookie
(환경 변수 YANDEX_COOKIE)로 주입합니다.
"""

from __future__ import annotations

from typing import Optional

from picsearch.core.config import settings
from picsearch.core.exceptions import UpstreamChallengeError
from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import HttpResponse, MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse, detect_challenge
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName

from .parsing import CAPTCHA_URL_MARKER, MAINTENANCE_MARKERS, SEARCH_PATH, YANDEX_URL, parse_results


_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "max-age=0",
    "DNT": "1",
    "Referer": YANDEX_URL,
}


class Yandex(ImageSearch):
    """Yandex Images (사이트 목록)"""

    engine_name = EngineName.YANDEX

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(
            base_url=YANDEX_URL,
            headers=dict(_BROWSER_HEADERS),
            cookie=settings.yandex_cookie or None,
        )

    @property
    def search_url(self) -> str:
        return f"{self.config.base_url}{SEARCH_PATH}"

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[YANDEX] search_by_url: {sanitize_for_log(url)}")
        params = {"rpt": "imageview", "url": url, "cbir_page": "sites"}
        async with self._open_client(options) as client:
            resp = await client.get(self.search_url, params=params)
        return self._parse(resp)

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        logger.info(f"[YANDEX] search_by_bytes: {len(data)} bytes")
        fields = [
            MultipartField("prg", "1"),
            MultipartField("upfile", data, filename="image.jpg", content_type="image/jpeg"),
        ]
        async with self._open_client(options) as client:
            resp = await client.post(
                self.search_url,
                params={"rpt": "imageview", "cbir_page": "sites"},
                multipart=fields,
            )
        return self._parse(resp)

    def _parse(self, resp: HttpResponse) -> SearchResponse:
        if CAPTCHA_URL_MARKER in resp.url:
            logger.info(f"[YANDEX] Redirected to captcha: {sanitize_for_log(resp.url)}")
            raise UpstreamChallengeError(self.name(), CAPTCHA_URL_MARKER)

        raise_for_status(resp, self.name())
        html = resp.text
        detect_challenge(html, MAINTENANCE_MARKERS, self.name())

        results = parse_results(html)
        logger.info(f"[YANDEX] {len(results)} results")
        return resp.url, results
