"""설정 관리 - 환경 변수 로드 및 검증"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # SauceNAO API 키 (없으면 비인증/저속 모드로 동작)
    saucenao_api_key: Optional[str] = None

    # HTTP 전송 계층
    http_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
    )
    http_impersonate: str = "chrome110"
    http_timeout_s: float = 30.0
    http_proxy: Optional[str] = None
    http_max_redirects: int = 10

    # Yandex 세션 쿠키 - 만료되는 값이므로 코드에 박지 않고 런타임에 주입합니다.
    yandex_cookie: str = ""

    # 검색 옵션 기본값
    default_min_similarity: float = 50.0

    # 로깅
    log_level: str = "INFO"

    @field_validator("http_timeout_s")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_s must be positive")
        return v

    @field_validator("http_max_redirects")
    @classmethod
    def validate_max_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_max_redirects must be >= 0")
        return v

    @field_validator("default_min_similarity")
    @classmethod
    def validate_min_similarity(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError("default_min_similarity must be within 0..100")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
