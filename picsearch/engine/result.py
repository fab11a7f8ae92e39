"""Search Result - Standardized Result Format

Provides one result schema shared by every engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional


class EngineName(str, Enum):
    """엔진 표시 이름

    결과의 source 기본값과 로그 태그로 사용합니다.
    """

    ASCII2D = "ASCII2D"
    IQDB = "IQDB"
    GOOGLE = "Google"
    GOOGLE_LENS = "Google Lens"
    YANDEX = "Yandex"
    SAUCENAO = "SauceNAO"
    SOUTUBOT = "Soutubot"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AdditionalInfo:
    """엔진별 부가 메타데이터

    Attributes:
        author: 작가명
        author_url: 작가 페이지
        source_url: 원본 출처
        created_at: 게시 시각 (엔진이 준 문자열 그대로)
        tags: 발견 순서대로의 태그 (중복 허용)
        size: (width, height)
        ext_urls: url 외의 대체/중복 링크
    """

    author: Optional[str] = None
    author_url: Optional[str] = None
    source_url: Optional[str] = None
    created_at: Optional[str] = None
    tags: tuple[str, ...] = ()
    size: Optional[tuple[int, int]] = None
    ext_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchResult:
    """검색 결과 표준 포맷

    Attributes:
        title: 제목
        url: 매칭된 페이지 URL (링크가 없으면 빈 문자열)
        thumbnail: 미리보기 URL 또는 data URI
        similarity: 0~100 유사도 (점수가 없는 엔진은 None)
        source: 엔진 또는 세부 인덱스 이름
        index: 엔진별 식별자/순번
        additional_info: 부가 정보
    """

    url: str
    source: str
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    similarity: Optional[float] = None
    index: Optional[str] = None
    additional_info: Optional[AdditionalInfo] = None


def normalize_similarity(value: Optional[float], scale: float = 100.0) -> Optional[float]:
    """업스트림 점수를 0~100 범위로 변환.

    Args:
        value: 원본 점수
        scale: 원본 점수의 만점 (0~1 분수면 1.0)

    Returns:
        0~100 사이로 클램프된 점수, 입력이 None이면 None
    """
    if value is None:
        return None
    percent = float(value) * (100.0 / scale)
    return max(0.0, min(100.0, percent))


def filter_by_similarity(
    results: Iterable[SearchResult], min_similarity: Optional[float]
) -> List[SearchResult]:
    """min_similarity 미만 결과를 제거합니다.

    점수가 없는 결과(similarity=None)는 필터 대상이 아닙니다.
    """
    if min_similarity is None:
        return list(results)
    return [
        r for r in results
        if r.similarity is None or r.similarity >= min_similarity
    ]
