"""Engine Contract - ImageSearch

모든 백엔드가 구현하는 다형 인터페이스입니다.

- 네이티브 진입점(search_by_url / search_by_bytes / search_by_base64) 중 최소 하나는
  반드시 오버라이드해야 합니다. 클래스 정의 시점에 검사합니다.
- 나머지 진입점은 기본 구현이 서로 위임합니다
  (file → bytes → base64, base64 → bytes). 위임 대상이 네이티브가 아니면
  무한 재귀 대신 EngineError를 올립니다.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from picsearch.core.config import settings
from picsearch.core.exceptions import EngineError, UpstreamChallengeError
from picsearch.core.logging import logger
from picsearch.crawlers.http_client import HttpClient
from picsearch.engine.options import SearchOptions
from picsearch.engine.result import EngineName, SearchResult
from picsearch.utils.encoding import base64_to_bytes, bytes_to_base64


SearchResponse = Tuple[str, List[SearchResult]]
ClientFactory = Callable[..., HttpClient]

_NATIVE_ENTRY_POINTS = ("search_by_url", "search_by_bytes", "search_by_base64")


@dataclass
class EngineConfig:
    """엔진별 생성 시점 설정

    Attributes:
        base_url: 업스트림 루트 URL
        user_agent: User-Agent 헤더
        headers: 세션 기본 헤더 (User-Agent 제외)
        cookie: 런타임에 주입하는 세션 쿠키 (Cookie 헤더)
        impersonate: curl_cffi 브라우저 지문
        proxy: 아웃바운드 프록시
        timeout_s: 요청 타임아웃 (초)
        follow_redirects: 세션 기본 리다이렉트 정책
    """

    base_url: str
    user_agent: str = field(default_factory=lambda: settings.http_user_agent)
    headers: Dict[str, str] = field(default_factory=dict)
    cookie: Optional[str] = None
    impersonate: Optional[str] = None
    proxy: Optional[str] = None
    timeout_s: Optional[float] = None
    follow_redirects: bool = True

    def build_headers(self) -> Dict[str, str]:
        merged = {"User-Agent": self.user_agent}
        merged.update(self.headers)
        if self.cookie:
            merged["Cookie"] = self.cookie
        return merged


def detect_challenge(html: str, markers: Iterable[str], engine: str) -> None:
    """챌린지/점검 문구가 보이면 UpstreamChallengeError.

    빈 결과와 '차단됨'을 구분하기 위해 파싱 전에 호출합니다.
    """
    if not html:
        return
    for marker in markers:
        if marker in html:
            logger.info(f"[{engine}] Challenge marker detected: {marker!r}")
            raise UpstreamChallengeError(engine, marker)


class ImageSearch(ABC):
    """역이미지 검색 엔진 인터페이스

    구현 예시:
        class MyEngine(ImageSearch):
            engine_name = EngineName.IQDB

            @classmethod
            def default_config(cls) -> EngineConfig:
                return EngineConfig(base_url="https://example.com")

            async def search_by_bytes(self, data, options=None):
                ...
    """

    engine_name: ClassVar[EngineName]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        overridden = [
            attr for attr in _NATIVE_ENTRY_POINTS
            if getattr(cls, attr) is not getattr(ImageSearch, attr)
        ]
        if not overridden:
            raise TypeError(
                f"{cls.__name__} must implement at least one of {', '.join(_NATIVE_ENTRY_POINTS)}"
            )

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.config = config or self.default_config()
        self._client_factory: ClientFactory = client_factory or HttpClient

    @classmethod
    @abstractmethod
    def default_config(cls) -> EngineConfig:
        """엔진 기본 설정 (base_url, 헤더 등)"""

    def name(self) -> str:
        return str(self.engine_name)

    def _implements(self, attr: str) -> bool:
        return getattr(type(self), attr) is not getattr(ImageSearch, attr)

    @staticmethod
    def _options(options: Optional[SearchOptions]) -> SearchOptions:
        return options or SearchOptions(min_similarity=settings.default_min_similarity)

    def _open_client(
        self,
        options: SearchOptions,
        *,
        follow_redirects: Optional[bool] = None,
    ) -> HttpClient:
        """검색 1회용 클라이언트 (쿠키 저장소 독립)"""
        return self._client_factory(
            headers=self.config.build_headers(),
            impersonate=self.config.impersonate,
            proxy=options.proxy or self.config.proxy,
            timeout_s=options.timeout or self.config.timeout_s,
            follow_redirects=self.config.follow_redirects if follow_redirects is None else follow_redirects,
        )

    async def search_by_url(self, url: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        """이미지 URL로 검색"""
        raise EngineError(self.name(), "URL search is not supported")

    async def search_by_file(
        self, path: Union[str, Path], options: Optional[SearchOptions] = None
    ) -> SearchResponse:
        """로컬 파일로 검색 - 파일 전체를 읽어 search_by_bytes로 위임"""
        data = await asyncio.to_thread(Path(path).read_bytes)
        logger.debug(f"[{self.name()}] Read {len(data)} bytes from {path}")
        return await self.search_by_bytes(data, options)

    async def search_by_bytes(self, data: bytes, options: Optional[SearchOptions] = None) -> SearchResponse:
        """원본 바이트로 검색 - 기본 구현은 base64로 인코딩해 위임"""
        if not self._implements("search_by_base64"):
            raise EngineError(self.name(), "binary search is not supported")
        return await self.search_by_base64(bytes_to_base64(data), options)

    async def search_by_base64(self, data: str, options: Optional[SearchOptions] = None) -> SearchResponse:
        """base64 데이터로 검색 - 기본 구현은 디코딩해 search_by_bytes로 위임

        Raises:
            DecodeError: 잘못된 base64 입력
        """
        if not self._implements("search_by_bytes"):
            raise EngineError(self.name(), "base64 search is not supported")
        return await self.search_by_bytes(base64_to_bytes(data), options)
