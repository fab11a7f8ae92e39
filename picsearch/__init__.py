"""picsearch - 역이미지 검색 엔진 모음 (async)

Usage:
    from picsearch import Iqdb

    page_url, results = await Iqdb().search_by_url("https://example.com/a.jpg")
"""

from picsearch.core.exceptions import (
    DecodeError,
    EngineError,
    ExtractionError,
    HttpStatusError,
    ImageSearchException,
    RateLimitError,
    TransportError,
    UpstreamApiError,
    UpstreamChallengeError,
)
from picsearch.engine import (
    AdditionalInfo,
    EngineConfig,
    EngineName,
    ImageSearch,
    SearchOptions,
    SearchResult,
)
from picsearch.crawlers.ascii2d import Ascii2d
from picsearch.crawlers.google import Google, GoogleResultPage
from picsearch.crawlers.google_lens import GoogleLens
from picsearch.crawlers.iqdb import Iqdb
from picsearch.crawlers.saucenao import SauceNao
from picsearch.crawlers.soutubot import Soutubot
from picsearch.crawlers.yandex import Yandex

__version__ = "0.1.0"

ALL_ENGINES = (Ascii2d, Google, GoogleLens, Iqdb, SauceNao, Soutubot, Yandex)

__all__ = [
    "ImageSearch",
    "EngineConfig",
    "EngineName",
    "SearchOptions",
    "SearchResult",
    "AdditionalInfo",
    "Ascii2d",
    "Google",
    "GoogleResultPage",
    "GoogleLens",
    "Iqdb",
    "SauceNao",
    "Soutubot",
    "Yandex",
    "ALL_ENGINES",
    "ImageSearchException",
    "TransportError",
    "HttpStatusError",
    "RateLimitError",
    "UpstreamChallengeError",
    "DecodeError",
    "ExtractionError",
    "UpstreamApiError",
    "EngineError",
]
