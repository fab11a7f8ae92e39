"""URL 유틸리티"""
from typing import Optional
from urllib.parse import quote, urlencode


def normalize_url(href: str, base_url: Optional[str] = None) -> str:
    """상대/프로토콜-상대 href를 절대 URL로 정규화합니다.

    - "//host/path" -> "https://host/path"
    - "/path" -> "{base_url}/path" (base_url이 주어진 경우만)
    - "http(s)://..." -> 그대로

    여러 번 적용해도 결과가 같습니다.

    Examples:
        >>> normalize_url("//a.com/b")
        'https://a.com/b'
        >>> normalize_url("/img/1.png", base_url="https://iqdb.org")
        'https://iqdb.org/img/1.png'
    """
    if not href:
        return ""

    h = href.strip()
    if not h:
        return ""

    if h.startswith("//"):
        return f"https:{h}"

    if h.startswith("/") and base_url:
        return f"{base_url.rstrip('/')}{h}"

    return h


def url_encode(value: str) -> str:
    """쿼리 값 하나를 퍼센트 인코딩 (공백은 %20)"""
    return quote(value, safe="")


def with_query(url: str, params: dict[str, object]) -> str:
    """기존 쿼리스트링 유무에 맞춰 파라미터를 덧붙입니다."""
    if not params:
        return url
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{urlencode(params)}"
