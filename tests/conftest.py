"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake HTTP 클라이언트 주입 (실제 네트워크 호출 금지)
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from picsearch.crawlers.http_client import HttpResponse  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


def build_response(
    status: int = 200,
    text: str = "",
    url: str = "https://example.com/",
    headers: Optional[Dict[str, str]] = None,
    json_body: Any = None,
) -> HttpResponse:
    """테스트용 HttpResponse 생성"""
    content = json.dumps(json_body).encode("utf-8") if json_body is not None else text.encode("utf-8")
    return HttpResponse(
        status=status,
        content=content,
        url=url,
        headers={k.lower(): v for k, v in (headers or {}).items()},
    )


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: Dict[str, Any]


class FakeHttpClient:
    """HttpClient 대역 - 미리 넣어 둔 응답을 순서대로 돌려줌"""

    def __init__(self, transport: "FakeTransport", **kwargs: Any) -> None:
        self.transport = transport
        self.kwargs = kwargs
        self.closed = False

    async def __aenter__(self) -> "FakeHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def request(self, method: str, url: str, **kwargs: Any) -> HttpResponse:
        self.transport.calls.append(RecordedCall(method, url, kwargs))
        if not self.transport.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        return self.transport.responses.pop(0)

    async def get(self, url: str, **kwargs: Any) -> HttpResponse:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> HttpResponse:
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeTransport:
    """엔진의 client_factory로 넘기는 Fake

    - responses: 요청 순서대로 소비할 응답
    - calls: 실제로 보낸 요청 기록
    - clients: 생성된 클라이언트 (생성 kwargs 확인용)
    """

    responses: List[HttpResponse] = field(default_factory=list)
    calls: List[RecordedCall] = field(default_factory=list)
    clients: List[FakeHttpClient] = field(default_factory=list)

    def __call__(self, **kwargs: Any) -> FakeHttpClient:
        client = FakeHttpClient(self, **kwargs)
        self.clients.append(client)
        return client

    def queue(self, *responses: HttpResponse) -> "FakeTransport":
        self.responses.extend(responses)
        return self


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_response():
    """HttpResponse 생성 헬퍼"""
    return build_response
