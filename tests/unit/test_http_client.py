"""HttpClient 단위 테스트 (curl_cffi 세션은 mock)"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from curl_cffi import CurlError

from picsearch.core.exceptions import HttpStatusError, RateLimitError, TransportError
from picsearch.crawlers.http_client import HttpClient, HttpResponse, MultipartField, raise_for_status


def _curl_response(status=200, content=b"ok", url="https://a.test/", headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    resp.url = url
    resp.headers = headers or {"Content-Type": "text/html"}
    return resp


class TestHttpResponse:
    def test_flags(self):
        assert HttpResponse(200, b"", "u").ok is True
        assert HttpResponse(302, b"", "u").is_redirect is True
        assert HttpResponse(404, b"", "u").ok is False

    def test_header_lookup_is_lowercase(self):
        resp = HttpResponse(302, b"", "u", {"location": "/next"})
        assert resp.header("Location") == "/next"
        assert resp.header("x-missing") is None

    def test_json(self):
        assert HttpResponse(200, b'{"a": 1}', "u").json() == {"a": 1}


class TestRaiseForStatus:
    def test_ok_passes(self):
        raise_for_status(HttpResponse(204, b"", "u"), "IQDB")

    def test_body_excerpt(self):
        with pytest.raises(HttpStatusError) as exc_info:
            raise_for_status(HttpResponse(500, b"x" * 2000, "u"), "IQDB")
        assert exc_info.value.status == 500
        assert len(exc_info.value.body) == 500

    def test_empty_body(self):
        with pytest.raises(HttpStatusError) as exc_info:
            raise_for_status(HttpResponse(404, b"", "u"), "IQDB")
        assert exc_info.value.body is None

    def test_429(self):
        with pytest.raises(RateLimitError):
            raise_for_status(HttpResponse(429, b"slow", "u"), "SauceNAO")


@pytest.mark.asyncio
async def test_request_wraps_response():
    with patch("picsearch.crawlers.http_client.AsyncSession") as mock_session_cls:
        session = MagicMock()
        session.request = AsyncMock(return_value=_curl_response(headers={"Location": "/x"}))
        session.close = AsyncMock()
        mock_session_cls.return_value = session

        async with HttpClient(headers={"User-Agent": "ua"}, timeout_s=5.0) as client:
            resp = await client.get("https://a.test/", allow_redirects=False)

        assert resp.status == 200
        assert resp.header("location") == "/x"
        kwargs = session.request.call_args.kwargs
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"] == 5.0
        session.close.assert_awaited_once()
        assert mock_session_cls.call_args.kwargs["headers"] == {"User-Agent": "ua"}


@pytest.mark.asyncio
async def test_request_builds_multipart_and_closes_it():
    with patch("picsearch.crawlers.http_client.AsyncSession") as mock_session_cls, \
            patch("picsearch.crawlers.http_client.CurlMime") as mock_mime_cls:
        session = MagicMock()
        session.request = AsyncMock(return_value=_curl_response())
        session.close = AsyncMock()
        mock_session_cls.return_value = session
        mime = MagicMock()
        mock_mime_cls.return_value = mime

        async with HttpClient() as client:
            await client.post(
                "https://a.test/upload",
                multipart=[
                    MultipartField("prg", "1"),
                    MultipartField("file", b"img", filename="image.jpg", content_type="image/jpeg"),
                ],
            )

        assert mime.addpart.call_count == 2
        assert mime.addpart.call_args_list[0].kwargs["data"] == b"1"
        assert mime.addpart.call_args_list[1].kwargs["filename"] == "image.jpg"
        assert session.request.call_args.kwargs["multipart"] is mime
        mime.close.assert_called_once()


@pytest.mark.asyncio
async def test_curl_error_becomes_transport_error():
    with patch("picsearch.crawlers.http_client.AsyncSession") as mock_session_cls:
        session = MagicMock()
        session.request = AsyncMock(side_effect=CurlError("Operation timed out"))
        session.close = AsyncMock()
        mock_session_cls.return_value = session

        client = HttpClient()
        with pytest.raises(TransportError):
            await client.get("https://a.test/")
        await client.close()
        session.close.assert_awaited_once()
