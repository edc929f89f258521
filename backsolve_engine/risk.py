from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from .cashflows import CashFlowStream
from .discount import DiscountModel, pv_flat_yield, pv_spread
from .utils import YearConvention, bp_to_decimal


def spread_dv01(stream: CashFlowStream, spread: float, year_convention: YearConvention = 360.0, bp: float = 1.0) -> float:
    """PV change for a +bp bump in the spread (negative for a long-only stream)."""
    base = pv_spread(stream, spread, year_convention)
    bumped = pv_spread(stream, spread + bp_to_decimal(bp), year_convention)
    return bumped - base


def yield_dv01(stream: CashFlowStream, yield_: float, bp: float = 1.0) -> float:
    base = pv_flat_yield(stream, yield_)
    bumped = pv_flat_yield(stream, yield_ + bp_to_decimal(bp))
    return bumped - base


def spread_duration(stream: CashFlowStream, spread: float, year_convention: YearConvention = 360.0) -> float:
    """Modified spread duration from a central 1bp difference."""
    h = bp_to_decimal(1.0)
    up = pv_spread(stream, spread + h, year_convention)
    down = pv_spread(stream, spread - h, year_convention)
    base = pv_spread(stream, spread, year_convention)
    if base == 0.0:
        raise ValueError("Spread duration undefined for a stream with zero PV.")
    return -(up - down) / (2.0 * h * base)


def pv_profile(model: DiscountModel, rates: Iterable[float]) -> pd.DataFrame:
    """PV of ``model`` across a grid of trial rates; useful to eyeball root existence."""
    grid = np.asarray(list(rates), dtype=float)
    pvs = np.array([model.present_value(r) for r in grid], dtype=float)
    return pd.DataFrame({"rate": grid, "pv": pvs})
