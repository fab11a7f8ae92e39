"""Google Lens 검색

- URL 검색: GET /uploadbyurl
- 바이트 검색: 리다이렉트를 끈 세션으로 업로드 → 302 Location이 결과 URL.
  신선도/뷰포트 파라미터(qsubts, biw, bih)를 붙여서 따라갑니다.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from picsearch.core.exceptions import ExtractionError
from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import HttpResponse, MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse, detect_challenge
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName, SearchResult, filter_by_similarity
from picsearch.utils.url import normalize_url, url_encode, with_query

from .parsing import CHALLENGE_MARKERS, LENS_URL, parse_results


_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_NAVIGATION_HEADERS = {
    "sec-ch-ua": '"Not(A:Brand";v="99", "Google Chrome";v="133", "Chromium";v="133"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "same-origin",
    "sec-fetch-user": "?1",
    "upgrade-insecure-requests": "1",
}

VIEWPORT = {"biw": 1920, "bih": 911}


def build_results_url(location: str, now_ms: int) -> str:
    """리다이렉트 Location에 qsubts/biw/bih를 덧붙입니다."""
    return with_query(location, {"qsubts": now_ms, **VIEWPORT})


class GoogleLens(ImageSearch):
    """Google Lens (best match + visual matches)"""

    engine_name = EngineName.GOOGLE_LENS

    def __init__(self, *args, clock: Callable[[], float] = time.time, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._clock = clock

    @classmethod
    def default_config(cls) -> EngineConfig:
        # Firefox UA에서 프리렌더 스크립트가 안정적으로 내려옴
        return EngineConfig(
            base_url=LENS_URL,
            user_agent="Mozilla/5.0 (X11; Linux x86_64; rv:103.0) Gecko/20100101 Firefox/103.0",
            headers=dict(_BROWSER_HEADERS),
        )

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        base_url = self.config.base_url
        search_url = f"{base_url}/uploadbyurl?url={url_encode(url)}&hl=en&gl=us"
        logger.info(f"[GOOGLE_LENS] search_by_url: {sanitize_for_log(url)}")

        async with self._open_client(options) as client:
            resp = await client.get(search_url, headers={"Referer": base_url})

        return search_url, self._parse(resp, options)

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        options = self._options(options)
        base_url = self.config.base_url
        upload_url = f"{base_url}/upload"
        logger.info(f"[GOOGLE_LENS] search_by_bytes: {len(data)} bytes")

        fields = [
            MultipartField("encoded_image", data, filename="image.jpg", content_type="image/jpeg"),
            MultipartField("image_content", ""),
        ]
        async with self._open_client(options, follow_redirects=False) as client:
            home = await client.get(base_url, allow_redirects=True)
            raise_for_status(home, self.name())

            upload = await client.post(
                upload_url,
                params={"hl": "en", "gl": "us"},
                headers={"Referer": base_url},
                multipart=fields,
            )
            location = self._redirect_location(upload)
            search_url = build_results_url(location, int(self._clock() * 1000))
            logger.info(f"[GOOGLE_LENS] Following upload redirect: {sanitize_for_log(search_url)}")

            resp = await client.get(
                search_url,
                headers={"Referer": upload_url, **_NAVIGATION_HEADERS},
                allow_redirects=True,
            )

        return search_url, self._parse(resp, options)

    def _redirect_location(self, upload: HttpResponse) -> str:
        """업로드 응답은 반드시 Location이 있는 3xx여야 합니다."""
        if upload.is_redirect:
            location = upload.header("location")
            if not location:
                raise ExtractionError(self.name(), "redirect response has no Location header")
            return normalize_url(location, self.config.base_url)
        raise_for_status(upload, self.name())
        raise ExtractionError(self.name(), f"expected a redirect after upload, got {upload.status}")

    def _parse(self, resp: HttpResponse, options: SearchOptions) -> List[SearchResult]:
        raise_for_status(resp, self.name())
        html = resp.text
        detect_challenge(html, CHALLENGE_MARKERS, self.name())

        results = parse_results(html)
        filtered = filter_by_similarity(results, options.min_similarity)
        logger.info(f"[GOOGLE_LENS] Parsed {len(results)} results ({len(filtered)} after similarity filter)")
        return filtered
