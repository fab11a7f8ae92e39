"""로깅 설정"""
import logging
import sys
import os
from picsearch.core.config import settings


# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"


def setup_logging() -> logging.Logger:
    """로거 초기화 및 설정"""

    logger = logging.getLogger("picsearch")

    log_level = settings.log_level.upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"

    logger.setLevel(getattr(logging, log_level))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level))

    if IS_PRODUCTION:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """로그에 남기기 전에 API 키/긴 데이터를 가립니다.

    - api_key 쿼리 파라미터 값은 마스킹
    - data URI(base64 썸네일 등)는 앞부분만 남김

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        안전하게 정리된 문자열
    """
    if not value:
        return "[empty]"

    result = value
    lowered = result.lower()
    marker = "api_key="
    idx = lowered.find(marker)
    if idx != -1:
        end = result.find("&", idx)
        tail = result[end:] if end != -1 else ""
        result = result[: idx + len(marker)] + "***" + tail

    if result.startswith("data:"):
        result = result[:32] + "..."

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result
