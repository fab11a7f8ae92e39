"""Google Lens engine."""

from .search import GoogleLens

__all__ = ["GoogleLens"]
