"""Soutubot engine."""

from .search import Soutubot

__all__ = ["Soutubot"]
