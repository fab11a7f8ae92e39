"""
수동 검색 데모 - 모든 엔진에 같은 이미지 URL을 순서대로 던져 결과를 확인
"""
import asyncio
import sys

from picsearch import ALL_ENGINES, ImageSearchException, SearchOptions


TEST_IMAGE_URL = "https://raw.githubusercontent.com/kitUIN/PicImageSearch/main/demo/images/test01.jpg"
PREVIEW_COUNT = 3


async def run_demo() -> None:
    """엔진별 검색 결과 요약 출력"""
    options = SearchOptions(min_similarity=0.0)

    for engine_cls in ALL_ENGINES:
        engine = engine_cls()
        print(f"\n{'='*60}")
        print(f"엔진: {engine.name()}")
        print('='*60)

        try:
            page_url, results = await engine.search_by_url(TEST_IMAGE_URL, options)
        except ImageSearchException as e:
            print(f"❌ 실패: {e}")
            continue

        print(f"✅ {len(results)}건")
        print(f"  - 결과 페이지: {page_url or 'N/A'}")
        for result in results[:PREVIEW_COUNT]:
            similarity = f"{result.similarity:.1f}%" if result.similarity is not None else "-"
            print(f"  - [{similarity}] {result.title or '(제목 없음)'}")
            print(f"      {result.url}")


def main() -> int:
    try:
        asyncio.run(run_demo())
    except Exception as e:
        print(f"데모 실행 실패: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
