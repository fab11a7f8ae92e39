"""base64 인코딩/디코딩 헬퍼"""

from __future__ import annotations

import base64
import binascii

from picsearch.core.exceptions import DecodeError


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(data: str) -> bytes:
    """표준 base64 문자열을 바이트로 디코딩.

    `data:image/...;base64,` 접두어가 붙어 있으면 떼어내고 디코딩합니다.

    Raises:
        DecodeError: 올바른 base64가 아닌 경우
    """
    if data is None:
        raise DecodeError("input is None")

    payload = data.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(str(e)) from e
