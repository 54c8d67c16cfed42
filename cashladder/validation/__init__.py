"""Validation of cash ladder solutions."""

from .solution_validator import SolutionValidationError, SolutionValidator

__all__ = [
    "SolutionValidationError",
    "SolutionValidator",
]
