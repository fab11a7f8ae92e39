"""SauceNAO engine (JSON API)."""

from .search import SauceNao

__all__ = ["SauceNao"]
