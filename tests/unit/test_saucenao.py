"""SauceNAO JSON 파싱/임계값 테스트"""
import pytest

from picsearch.core.exceptions import ExtractionError, RateLimitError, UpstreamApiError
from picsearch.crawlers.saucenao import SauceNao
from picsearch.crawlers.saucenao.parsing import parse_response, to_results
from picsearch.engine.options import SearchOptions


def _item(similarity, ext_urls, title="Work", index_id=5, index_name="Index #5: Pixiv Images"):
    return {
        "header": {
            "similarity": similarity,
            "thumbnail": "https://img3.saucenao.com/thumb.jpg",
            "index_id": index_id,
            "index_name": index_name,
        },
        "data": {
            "ext_urls": ext_urls,
            "title": title,
            "author_name": "Artist",
            "author_url": "https://www.pixiv.net/users/1",
        },
    }


def _payload(*items, status=0, message=None):
    header = {"status": status, "results_returned": len(items)}
    if message:
        header["message"] = message
    return {"header": header, "results": list(items)}


def test_to_results_maps_fields():
    response = parse_response(_payload(_item("92.14", ["https://www.pixiv.net/artworks/1", "https://mirror.test/1"])))
    results = to_results(response, 0.0)

    assert len(results) == 1
    r = results[0]
    assert r.url == "https://www.pixiv.net/artworks/1"
    assert r.similarity == pytest.approx(92.14)
    assert r.source == "Index #5: Pixiv Images"
    assert r.index == "5"
    assert r.additional_info.ext_urls == ("https://mirror.test/1",)
    assert r.additional_info.author == "Artist"


def test_null_ext_urls_falls_back_to_source():
    item = _item("88.0", None)
    item["data"]["source"] = "https://twitter.com/a/status/1"
    results = to_results(parse_response(_payload(item)), 0.0)
    assert results[0].url == "https://twitter.com/a/status/1"
    assert results[0].additional_info.ext_urls == ()


def test_negative_status_raises_upstream_error():
    with pytest.raises(UpstreamApiError) as exc_info:
        parse_response(_payload(status=-2, message="Search Rate Too High."))
    assert exc_info.value.status == -2
    assert exc_info.value.upstream_message == "Search Rate Too High."


def test_missing_header_raises_extraction_error():
    with pytest.raises(ExtractionError):
        parse_response({"results": []})


def test_null_results_is_empty():
    assert to_results(parse_response({"header": {"status": 0}, "results": None}), 0.0) == []


@pytest.mark.asyncio
async def test_url_search_defaults_to_zero_threshold(transport, make_response):
    transport.queue(make_response(json_body=_payload(_item("12.5", ["https://a.test/1"]))))
    engine = SauceNao(api_key="secret", client_factory=transport)

    page_url, results = await engine.search_by_url("https://img.test/a.jpg", SearchOptions(min_similarity=None))

    assert page_url == "https://saucenao.com/search.php?url=https%3A%2F%2Fimg.test%2Fa.jpg"
    assert len(results) == 1
    params = transport.calls[0].kwargs["params"]
    assert params["api_key"] == "secret"
    assert params["output_type"] == 2
    assert params["numres"] == 16


@pytest.mark.asyncio
async def test_url_search_without_api_key_omits_param(transport, make_response):
    transport.queue(make_response(json_body=_payload()))
    engine = SauceNao(api_key="", client_factory=transport)
    await engine.search_by_url("https://img.test/a.jpg")
    assert "api_key" not in transport.calls[0].kwargs["params"]


@pytest.mark.asyncio
async def test_upload_defaults_to_eighty_threshold(transport, make_response):
    transport.queue(
        make_response(json_body=_payload(
            _item("85.0", ["https://a.test/1"]),
            _item("60.0", ["https://a.test/2"]),
        ))
    )
    engine = SauceNao(api_key="k", client_factory=transport)

    page_url, results = await engine.search_by_bytes(b"png", SearchOptions(min_similarity=None))

    assert page_url == ""
    assert [r.url for r in results] == ["https://a.test/1"]
    fields = {p.name: p.data for p in transport.calls[0].kwargs["multipart"]}
    assert fields["minsim"] == "80.0"
    assert fields["dbmask"] == "999"
    assert fields["file"] == b"png"


@pytest.mark.asyncio
async def test_explicit_threshold_overrides_default(transport, make_response):
    transport.queue(make_response(json_body=_payload(_item("60.0", ["https://a.test/2"]))))
    _, results = await SauceNao(api_key="k", client_factory=transport).search_by_bytes(
        b"png", SearchOptions(min_similarity=55)
    )
    assert len(results) == 1


@pytest.mark.asyncio
async def test_non_json_body_raises(transport, make_response):
    transport.queue(make_response(text="<html>error</html>"))
    with pytest.raises(ExtractionError):
        await SauceNao(client_factory=transport).search_by_url("https://img.test/a.jpg")


@pytest.mark.asyncio
async def test_429_raises_rate_limit(transport, make_response):
    transport.queue(make_response(status=429, text="Too many requests"))
    with pytest.raises(RateLimitError):
        await SauceNao(client_factory=transport).search_by_url("https://img.test/a.jpg")


@pytest.mark.asyncio
async def test_upload_without_options_uses_engine_default(transport, make_response):
    transport.queue(make_response(json_body=_payload(_item("70.0", ["https://a.test/1"]))))
    _, results = await SauceNao(api_key="k", client_factory=transport).search_by_bytes(b"png")
    assert results == []
    fields = {p.name: p.data for p in transport.calls[0].kwargs["multipart"]}
    assert fields["minsim"] == "80.0"
