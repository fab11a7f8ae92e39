"""Yandex engine."""

from .search import Yandex

__all__ = ["Yandex"]
