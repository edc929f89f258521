from __future__ import annotations

import math
from typing import Union

import numpy as np

# Actual/365 fixed; the flat-yield model is always quoted on this basis.
IRR_YEAR_CONVENTION = 365.0

_DAY_COUNT_DENOMINATORS = {
    "ACT/360": 360.0,
    "ACT/365": 365.0,
    "ACT/365F": 365.0,
}

YearConvention = Union[float, int, str]


def resolve_year_convention(convention: YearConvention) -> float:
    """
    Day-count denominator converting day differences into year fractions.

    Accepts a positive number (e.g. 360, 365) or a convention name:
    - ACT/360
    - ACT/365, ACT/365F
    """
    if isinstance(convention, str):
        key = convention.upper().replace(" ", "")
        if key not in _DAY_COUNT_DENOMINATORS:
            raise ValueError(f"Unsupported day count convention: {convention}")
        return _DAY_COUNT_DENOMINATORS[key]

    if isinstance(convention, bool):
        raise ValueError(f"Invalid year convention: {convention!r}")

    denom = float(convention)
    if not math.isfinite(denom) or denom <= 0.0:
        raise ValueError(f"Year convention must be positive and finite, got {convention!r}")
    return denom


def yearfrac_days(days: np.ndarray, year_convention: float) -> np.ndarray:
    """Year fraction for each day count under an Actual/<year_convention> basis."""
    return np.asarray(days, dtype=float) / float(year_convention)


def within_tolerance(residual: float, tolerance: float) -> bool:
    return abs(residual) <= tolerance


def bp_to_decimal(bp: float) -> float:
    return bp / 10000.0
