"""설정 테스트"""
import pytest
from pydantic import ValidationError

from picsearch.core.config import Settings
from picsearch.core.logging import sanitize_for_log


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SAUCENAO_API_KEY", "abc123")
    monkeypatch.setenv("HTTP_TIMEOUT_S", "12.5")
    monkeypatch.setenv("YANDEX_COOKIE", "yandexuid=1")

    s = Settings()
    assert s.saucenao_api_key == "abc123"
    assert s.http_timeout_s == 12.5
    assert s.yandex_cookie == "yandexuid=1"


def test_settings_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        Settings(http_timeout_s=0)


def test_settings_rejects_similarity_out_of_range():
    with pytest.raises(ValidationError):
        Settings(default_min_similarity=101)


class TestSanitizeForLog:
    def test_masks_api_key(self):
        assert sanitize_for_log("https://s.com/?api_key=secret&x=1") == "https://s.com/?api_key=***&x=1"

    def test_truncates_data_uri(self):
        value = "data:image/png;base64," + "A" * 500
        assert sanitize_for_log(value).endswith("...")
        assert len(sanitize_for_log(value)) < 40

    def test_empty(self):
        assert sanitize_for_log("") == "[empty]"
