"""Shared utilities."""

from .numeric import clean_value

__all__ = ["clean_value"]
