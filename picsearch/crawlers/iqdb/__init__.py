"""IQDB engine."""

from .search import Iqdb

__all__ = ["Iqdb"]
