"""Parsers for input data files."""

from .requirements_parser import RequirementsParser

__all__ = [
    "RequirementsParser",
]
