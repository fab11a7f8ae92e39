"""Engine Layer - 공통 계약과 결과 모델

- ImageSearch: 모든 백엔드가 구현하는 다형 인터페이스
- EngineConfig: 엔진별 생성 시점 설정
- SearchOptions: 호출 단위 옵션
- SearchResult / AdditionalInfo: 정규화된 결과 레코드
"""

from .base import ClientFactory, EngineConfig, ImageSearch, SearchResponse, detect_challenge
from .options import SearchOptions
from .result import (
    AdditionalInfo,
    EngineName,
    SearchResult,
    filter_by_similarity,
    normalize_similarity,
)

__all__ = [
    "ImageSearch",
    "EngineConfig",
    "ClientFactory",
    "SearchResponse",
    "detect_challenge",
    "SearchOptions",
    "SearchResult",
    "AdditionalInfo",
    "EngineName",
    "normalize_similarity",
    "filter_by_similarity",
]
