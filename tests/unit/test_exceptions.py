"""예외 계층 테스트"""
from picsearch.core.exceptions import (
    EngineError,
    ExtractionError,
    HttpStatusError,
    ImageSearchException,
    RateLimitError,
    TransportError,
    UpstreamApiError,
    UpstreamChallengeError,
)


def test_str_includes_error_code():
    e = HttpStatusError("IQDB", 503, "oops")
    assert str(e) == "[HTTP_STATUS] IQDB returned status code: 503"
    assert e.status == 503
    assert e.body == "oops"


def test_rate_limit_is_http_status():
    e = RateLimitError("SauceNAO", "slow down")
    assert isinstance(e, HttpStatusError)
    assert e.status == 429
    assert e.error_code == "RATE_LIMIT"


def test_upstream_api_error_default_message():
    e = UpstreamApiError("SauceNAO", -1)
    assert e.upstream_message == "Unknown error"
    assert "API error -1" in e.message


def test_all_share_base():
    errors = [
        TransportError("https://a.com", "timeout"),
        UpstreamChallengeError("Google", "captcha"),
        ExtractionError("Yandex", "missing"),
        EngineError("IQDB", "unsupported"),
    ]
    for e in errors:
        assert isinstance(e, ImageSearchException)
        assert e.details
