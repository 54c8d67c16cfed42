"""Analysis of solved cash ladders.

This module provides tools for reading post-optimal information from a solved
cash ladder, including:
- Shadow prices and allowable RHS ranges per balance month
- Reduced costs per variable
- What-if re-optimization with a perturbed requirement
"""

from .sensitivity import SensitivityAnalyzer
from .rhs_perturbation import PerturbationOutcome, RhsPerturbation

__all__ = [
    "SensitivityAnalyzer",
    "PerturbationOutcome",
    "RhsPerturbation",
]
