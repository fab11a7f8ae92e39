"""텍스트 정리 헬퍼 (가격, 크기, 공백)"""

from __future__ import annotations

import re
from typing import Optional


_NON_NUMERIC = re.compile(r"[^\d.]")
_SIZE = re.compile(r"(\d+)\s*[x×]\s*(\d+)")


def clean_price(text: Optional[str]) -> Optional[str]:
    """가격 문자열에서 숫자와 소수점만 남깁니다 ("$1,299.00" -> "1299.00")."""
    if text is None:
        return None
    return _NON_NUMERIC.sub("", text)


def parse_size(text: str) -> Optional[tuple[int, int]]:
    """"500×700 [Safe]" 같은 텍스트에서 (width, height)를 꺼냅니다."""
    if not text:
        return None
    m = _SIZE.search(text)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def squash_whitespace(text: str) -> str:
    return " ".join((text or "").split())
