"""
Small numeric guards shared by the estimators.

Every ratio in the forecasting engine goes through ``safe_divide`` so that a
zero denominator degrades to a sentinel value instead of raising or leaking
``inf``/``nan`` into a forecast.
"""

from __future__ import annotations

import math


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Return ``numerator / denominator``, or ``default`` when undefined.

    ``default`` is returned when the denominator is zero or non-finite, or when
    the quotient itself is not finite.

    Examples::

        >>> safe_divide(10, 4)
        2.5
        >>> safe_divide(10, 0)
        0.0
        >>> safe_divide(10, 0, default=-1.0)
        -1.0
    """
    if denominator == 0 or not math.isfinite(denominator):
        return default
    result = numerator / denominator
    if not math.isfinite(result):
        return default
    return result


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` to ``[lo, hi]``. ``nan`` collapses to ``lo``."""
    if math.isnan(value):
        return lo
    return max(lo, min(hi, value))


def clamp_unit(value: float) -> float:
    """Clamp a confidence value to ``[0, 1]``."""
    return clamp(value, 0.0, 1.0)
