"""Pydantic 스키마 - 호출자 검색 옵션"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchOptions(BaseModel):
    """호출자가 넘기는 검색 옵션"""

    model_config = ConfigDict(frozen=True)

    proxy: Optional[str] = Field(None, max_length=2048, description="아웃바운드 프록시 URL")
    timeout: Optional[float] = Field(None, gt=0, description="요청 타임아웃 (초)")
    min_similarity: Optional[float] = Field(50.0, ge=0.0, le=100.0, description="이 값 미만 결과는 파싱 후 제거")
    hide_explicit: bool = Field(False, description="예약 옵션 - 현재 어떤 엔진도 적용하지 않음")

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: Optional[str]) -> Optional[str]:
        """프록시 URL 검증"""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if "://" not in v:
            raise ValueError("proxy는 scheme://host:port 형식이어야 합니다")
        return v
