"""
Excel exporters for cash ladder results.

This module provides a formatted Excel export with the solution values and
the sensitivity tables of a solved ladder.
"""

from .excel_report import export_solution_to_excel

__all__ = [
    'export_solution_to_excel',
]
