"""HTTP 클라이언트 (curl_cffi)

- 엔진은 검색 호출마다 HttpClient를 하나 열고 닫습니다. 세션마다 쿠키 저장소가
  따로 있으므로 동시에 도는 검색끼리 세션 상태가 섞이지 않습니다.
- 리다이렉트는 세션 기본값을 두고 요청 단위로 끌 수 있습니다 (3xx 직접 확인용).
- gzip/deflate/brotli 디코딩은 curl이 처리합니다.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Union

from curl_cffi import CurlError, CurlMime
from curl_cffi.requests import AsyncSession

from picsearch.core.config import settings
from picsearch.core.exceptions import HttpStatusError, RateLimitError, TransportError
from picsearch.core.logging import logger, sanitize_for_log


_BODY_EXCERPT_CHARS = 500


@dataclass(frozen=True)
class MultipartField:
    """multipart/form-data 파트 하나 (텍스트 필드 또는 파일)"""

    name: str
    data: Union[bytes, str]
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass
class HttpResponse:
    """전송 계층 응답 (status/headers/body)"""

    status: int
    content: bytes
    url: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return self.status in (301, 302, 303, 307, 308)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def json(self) -> Any:
        return json.loads(self.content)


def raise_for_status(response: HttpResponse, engine: str) -> None:
    """2xx가 아니면 상태 코드와 본문 일부를 담아 예외를 올립니다.

    Raises:
        RateLimitError: 429
        HttpStatusError: 그 밖의 non-2xx
    """
    if response.ok:
        return
    body = response.text[:_BODY_EXCERPT_CHARS] if response.content else None
    logger.info(f"[{engine}] Non-2xx status: {response.status}")
    if response.status == 429:
        raise RateLimitError(engine, body)
    raise HttpStatusError(engine, response.status, body)


def _build_mime(parts: Sequence[MultipartField]) -> CurlMime:
    mime = CurlMime()
    for part in parts:
        data = part.data.encode("utf-8") if isinstance(part.data, str) else part.data
        mime.addpart(
            name=part.name,
            content_type=part.content_type,
            filename=part.filename,
            data=data,
        )
    return mime


class HttpClient:
    """엔진이 쓰는 얇은 HTTP capability.

    Usage:
        async with HttpClient(headers={...}, proxy=None, timeout_s=30) as client:
            resp = await client.get("https://example.com")
    """

    def __init__(
        self,
        *,
        headers: Optional[Dict[str, str]] = None,
        impersonate: Optional[str] = None,
        proxy: Optional[str] = None,
        timeout_s: Optional[float] = None,
        follow_redirects: bool = True,
        max_redirects: Optional[int] = None,
    ) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None
        self.headers = dict(headers or {})
        self.impersonate = impersonate or settings.http_impersonate
        self.proxy = proxy or settings.http_proxy
        self.timeout_s = timeout_s or settings.http_timeout_s
        self.follow_redirects = follow_redirects
        self.max_redirects = settings.http_max_redirects if max_redirects is None else max_redirects

    async def __aenter__(self) -> "HttpClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=self.impersonate,
                headers=self.headers,
                proxy=self.proxy,
                timeout=self.timeout_s,
                allow_redirects=self.follow_redirects,
                max_redirects=self.max_redirects,
                trust_env=False,
            )
            return self._session

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        multipart: Optional[Sequence[MultipartField]] = None,
        allow_redirects: Optional[bool] = None,
    ) -> HttpResponse:
        """요청 하나를 보내고 응답을 돌려줍니다.

        Raises:
            TransportError: 연결/DNS/TLS/타임아웃 실패
        """
        sess = await self._ensure_session()
        follow = self.follow_redirects if allow_redirects is None else allow_redirects
        mime = _build_mime(multipart) if multipart else None

        logger.debug(f"[HTTP_CLIENT] {method} {sanitize_for_log(url, 160)} (redirects={follow})")
        try:
            resp = await sess.request(
                method,
                url,
                headers=headers,
                params=params,
                data=data,
                multipart=mime,
                allow_redirects=follow,
                timeout=self.timeout_s,
            )
        except CurlError as e:
            logger.info(f"[HTTP_CLIENT] {method} failed: {type(e).__name__}: {e!r}")
            raise TransportError(url, str(e)) from e
        finally:
            if mime is not None:
                mime.close()

        return HttpResponse(
            status=int(getattr(resp, "status_code", 0) or 0),
            content=getattr(resp, "content", b"") or b"",
            url=str(getattr(resp, "url", url) or url),
            headers={k.lower(): v for k, v in resp.headers.items()},
        )

    async def get(self, url: str, **kwargs: Any) -> HttpResponse:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> HttpResponse:
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            finally:
                self._session = None
