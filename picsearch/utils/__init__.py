"""Utilities package - Flat structure

- url: URL 정규화/쿼리 조립
- encoding: base64 변환
- text: 가격/크기/공백 정리
"""

from .url import normalize_url, url_encode, with_query
from .encoding import bytes_to_base64, base64_to_bytes
from .text import clean_price, parse_size, squash_whitespace

__all__ = [
    # url
    "normalize_url",
    "url_encode",
    "with_query",
    # encoding
    "bytes_to_base64",
    "base64_to_bytes",
    # text
    "clean_price",
    "parse_size",
    "squash_whitespace",
]
