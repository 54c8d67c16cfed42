"""Persistence layer for solve results."""

from .solve_file import SolveFile, SolveRecord

__all__ = [
    'SolveFile',
    'SolveRecord',
]
