"""Google 이미지 검색 (searchbyimage) + 페이지네이션 상태

- URL 검색: GET /searchbyimage
- 바이트 검색: 홈페이지로 쿠키를 받은 뒤 /searchbyimage/upload 로 multipart 업로드
- 결과 페이지는 GoogleResultPage로 감싸 advance()/retreat()로 이동합니다.
  범위를 벗어나면 네트워크 호출 없이 None을 돌려줍니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from picsearch.core.logging import logger, sanitize_for_log
from picsearch.crawlers.http_client import HttpResponse, MultipartField, raise_for_status
from picsearch.engine.base import EngineConfig, ImageSearch, SearchResponse, detect_challenge
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName, SearchResult
from picsearch.utils.url import url_encode

from .parsing import CHALLENGE_MARKERS, GOOGLE_URL, ParsedPage, parse_page


_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def merge_page_urls(known: Iterable[str], discovered: Mapping[int, str]) -> List[str]:
    """페이지 번호 기준으로 URL 목록을 갱신합니다.

    - 이미 알고 있는 위치(1페이지 포함)는 덮어쓰지 않음
    - 바로 다음 번호만 이어 붙임 (중간이 빈 번호는 해당 페이지에 도달했을 때 채워짐)
    """
    merged = list(known)
    for number in sorted(discovered):
        if number == len(merged) + 1:
            merged.append(discovered[number])
    return merged


@dataclass
class GoogleResultPage:
    """Google 결과 페이지 상태

    Attributes:
        results: 현재 페이지 결과
        pages: 페이지 URL 목록 (current_page 기준 1부터)
        current_page: 현재 페이지 번호 (1-based)
        url: 현재 페이지 URL
    """

    results: List[SearchResult]
    pages: List[str]
    current_page: int
    url: str
    engine: "Google" = field(repr=False, compare=False)
    options: Optional[SearchOptions] = field(default=None, repr=False, compare=False)

    @property
    def has_next(self) -> bool:
        return self.current_page + 1 <= len(self.pages)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    async def advance(self) -> Optional["GoogleResultPage"]:
        """다음 페이지. 마지막 페이지면 None."""
        return await self.engine.next_page(self, self.options)

    async def retreat(self) -> Optional["GoogleResultPage"]:
        """이전 페이지. 1페이지면 None."""
        return await self.engine.prev_page(self, self.options)


class Google(ImageSearch):
    """Google 이미지 검색 (유사도 점수 없음)"""

    engine_name = EngineName.GOOGLE

    @classmethod
    def default_config(cls) -> EngineConfig:
        return EngineConfig(base_url=GOOGLE_URL, headers=dict(_BROWSER_HEADERS))

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        page = await self.search_page_by_url(url, options)
        return page.url, page.results

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        page = await self.search_page_by_bytes(data, options)
        return page.url, page.results

    async def search_page_by_url(
        self, url: str, options: Optional[SearchOptions] = None
    ) -> GoogleResultPage:
        options = self._options(options)
        base_url = self.config.base_url
        search_url = f"{base_url}/searchbyimage?image_url={url_encode(url)}&client=Chrome"
        logger.info(f"[GOOGLE] search_by_url: {sanitize_for_log(url)}")

        async with self._open_client(options) as client:
            resp = await client.get(search_url, headers={"Referer": base_url})

        parsed = self._parse(resp)
        return self._first_page(parsed, search_url, options)

    async def search_page_by_bytes(
        self, data: bytes, options: Optional[SearchOptions] = None
    ) -> GoogleResultPage:
        options = self._options(options)
        base_url = self.config.base_url
        logger.info(f"[GOOGLE] search_by_bytes: {len(data)} bytes")

        fields = [
            MultipartField("encoded_image", data, filename="image.jpg", content_type="image/jpeg"),
            MultipartField("image_content", ""),
        ]
        async with self._open_client(options) as client:
            # 쿠키 확보
            home = await client.get(base_url)
            raise_for_status(home, self.name())
            resp = await client.post(
                f"{base_url}/searchbyimage/upload",
                params={"hl": "en", "gl": "us"},
                headers={"Referer": base_url},
                multipart=fields,
            )

        parsed = self._parse(resp)
        return self._first_page(parsed, resp.url, options)

    async def next_page(
        self, page: GoogleResultPage, options: Optional[SearchOptions] = None
    ) -> Optional[GoogleResultPage]:
        target = page.current_page + 1
        if target > len(page.pages):
            return None
        return await self._fetch_page(page, target, options)

    async def prev_page(
        self, page: GoogleResultPage, options: Optional[SearchOptions] = None
    ) -> Optional[GoogleResultPage]:
        if page.current_page <= 1:
            return None
        target = page.current_page - 1
        if target > len(page.pages):
            return None
        return await self._fetch_page(page, target, options)

    async def _fetch_page(
        self, page: GoogleResultPage, number: int, options: Optional[SearchOptions]
    ) -> GoogleResultPage:
        options = self._options(options)
        url = page.pages[number - 1]
        logger.info(f"[GOOGLE] Fetching page {number}/{len(page.pages)}")

        async with self._open_client(options) as client:
            resp = await client.get(url, headers={"Referer": self.config.base_url})

        parsed = self._parse(resp)
        return GoogleResultPage(
            results=parsed.results,
            pages=merge_page_urls(page.pages, parsed.page_urls),
            current_page=number,
            url=url,
            engine=self,
            options=options,
        )

    def _parse(self, resp: HttpResponse) -> ParsedPage:
        raise_for_status(resp, self.name())
        html = resp.text
        detect_challenge(html, CHALLENGE_MARKERS, self.name())
        parsed = parse_page(html, self.config.base_url)
        logger.info(f"[GOOGLE] Parsed {len(parsed.results)} results, {len(parsed.page_urls)} page links")
        return parsed

    def _first_page(self, parsed: ParsedPage, url: str, options: SearchOptions) -> GoogleResultPage:
        return GoogleResultPage(
            results=parsed.results,
            pages=merge_page_urls([url], parsed.page_urls),
            current_page=1,
            url=url,
            engine=self,
            options=options,
        )
