"""ASCII2D engine (색상 + 특징 검색)."""

from .search import Ascii2d

__all__ = ["Ascii2d"]
