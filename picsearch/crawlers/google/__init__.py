"""Google image search engine (with pagination)."""

from .search import Google, GoogleResultPage

__all__ = ["Google", "GoogleResultPage"]
