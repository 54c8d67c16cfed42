"""Numeric helpers shared by solution and sensitivity extraction."""

from typing import Optional

from .. import constants


def clean_value(amount: Optional[float], threshold: float = constants.ZERO_THRESHOLD) -> float:
    """Snap solver noise around zero to exactly zero.

    Args:
        amount: Value read from the solver (None when the solver left it unset)
        threshold: Magnitudes below this become 0.0

    Returns:
        Cleaned float
    """
    if amount is None:
        return 0.0
    return 0.0 if abs(amount) < threshold else float(amount)
