"""ASCII2D 파싱/흐름 테스트"""
import pytest

from picsearch.core.exceptions import ExtractionError, HttpStatusError, UpstreamChallengeError
from picsearch.crawlers.ascii2d import Ascii2d
from picsearch.crawlers.ascii2d.parsing import find_bovw_url, parse_results
from picsearch.engine.options import SearchOptions


def _item(hash_value, author, title, href):
    return f"""
    <div class='row item-box'>
      <div class='col-xs-12 col-sm-12 col-md-4 col-xl-4 text-xs-center image-box'>
        <img src='/thumbnail/{hash_value}.jpg' alt='{hash_value}'>
      </div>
      <div class='col-xs-12 col-sm-12 col-md-8 col-xl-8 info-box'>
        <div class='hash'>{hash_value}</div>
        <small>1200x1600 JPEG 245.1KB</small>
        <div class='detail-box gray-link'>
          <h6>
            <a href='https://www.pixiv.net/users/1' rel='noopener'>{author}</a>
            <a href='{href}' rel='noopener'>{title}</a>
          </h6>
        </div>
      </div>
    </div>
    """


COLOR_HTML = f"""
<html><body>
  <div class='row item-box'>
    <div class='info-box'><div class='hash'>uploaded</div><div class='detail-box'></div></div>
  </div>
  {_item("aaa111", "Artist A", "Color Work", "https://www.pixiv.net/artworks/1")}
  <a href='/search/bovw/aaa111'>特徴検索</a>
</body></html>
"""

BOVW_HTML = f"""
<html><body>
  {_item("bbb222", "Artist B", "Feature Work 1", "//twitter.com/b/status/2")}
  {_item("ccc333", "Artist C", "Feature Work 2", "https://www.pixiv.net/artworks/3")}
</body></html>
"""


def test_parse_results_reads_detail_box():
    results = parse_results(COLOR_HTML)
    assert len(results) == 1
    r = results[0]
    assert r.title == "Color Work"
    assert r.url == "https://www.pixiv.net/artworks/1"
    assert r.thumbnail == "https://ascii2d.net/thumbnail/aaa111.jpg"
    assert r.index == "aaa111"
    assert r.similarity is None
    assert r.additional_info.author == "Artist A"
    assert r.additional_info.author_url == "https://www.pixiv.net/users/1"


def test_parse_results_without_item_box_raises():
    with pytest.raises(ExtractionError):
        parse_results("<html><body>nothing</body></html>")


def test_find_bovw_url():
    assert find_bovw_url(COLOR_HTML) == "https://ascii2d.net/search/bovw/aaa111"
    assert find_bovw_url("<html></html>") is None


@pytest.mark.asyncio
async def test_search_concatenates_color_then_feature(transport, make_response):
    transport.queue(
        make_response(text="<html>home</html>", url="https://ascii2d.net/"),
        make_response(text=COLOR_HTML, url="https://ascii2d.net/search/color/aaa111"),
        make_response(text=BOVW_HTML, url="https://ascii2d.net/search/bovw/aaa111"),
    )
    engine = Ascii2d(client_factory=transport)

    page_url, results = await engine.search_by_url("https://a.com/x.jpg", SearchOptions())

    assert page_url == "https://ascii2d.net/search/color/aaa111"
    assert [r.title for r in results] == ["Color Work", "Feature Work 1", "Feature Work 2"]
    assert results[1].url == "https://twitter.com/b/status/2"
    assert [c.method for c in transport.calls] == ["GET", "POST", "GET"]
    assert transport.calls[1].url == "https://ascii2d.net/search/uri"
    assert transport.calls[2].url == "https://ascii2d.net/search/bovw/aaa111"
    assert transport.clients[0].closed is True


@pytest.mark.asyncio
async def test_bytes_search_uploads_file(transport, make_response):
    transport.queue(
        make_response(text="home"),
        make_response(text=COLOR_HTML),
        make_response(text=BOVW_HTML),
    )
    await Ascii2d(client_factory=transport).search_by_bytes(b"\x89PNG")

    post = transport.calls[1]
    assert post.url == "https://ascii2d.net/search/file"
    part = post.kwargs["multipart"][0]
    assert part.name == "file"
    assert part.data == b"\x89PNG"


@pytest.mark.asyncio
async def test_missing_feature_link_raises(transport, make_response):
    color_only = COLOR_HTML.replace("<a href='/search/bovw/aaa111'>特徴検索</a>", "")
    transport.queue(make_response(text="home"), make_response(text=color_only))
    with pytest.raises(ExtractionError):
        await Ascii2d(client_factory=transport).search_by_url("https://a.com/x.jpg")


@pytest.mark.asyncio
async def test_cloudflare_challenge(transport, make_response):
    transport.queue(
        make_response(text="home"),
        make_response(status=200, text="<title>Just a moment...</title>"),
    )
    with pytest.raises(UpstreamChallengeError):
        await Ascii2d(client_factory=transport).search_by_url("https://a.com/x.jpg")


@pytest.mark.asyncio
async def test_feature_page_error_raises(transport, make_response):
    transport.queue(
        make_response(text="home"),
        make_response(text=COLOR_HTML),
        make_response(status=502, text="bad gateway"),
    )
    with pytest.raises(HttpStatusError) as exc_info:
        await Ascii2d(client_factory=transport).search_by_url("https://a.com/x.jpg")
    assert exc_info.value.status == 502
