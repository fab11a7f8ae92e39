"""Engine crawlers (curl_cffi + selectolax).

엔진별 패키지는 `search.py`(요청 흐름)와 `parsing.py`(순수 파싱)로 나뉩니다.
엔진 클래스는 최상위 `picsearch` 패키지에서 export합니다.
"""

from .http_client import HttpClient, HttpResponse, MultipartField, raise_for_status

__all__ = [
    "HttpClient",
    "HttpResponse",
    "MultipartField",
    "raise_for_status",
]
