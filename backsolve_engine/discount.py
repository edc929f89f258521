from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from .cashflows import CashFlowStream
from .errors import InvalidStreamError
from .utils import IRR_YEAR_CONVENTION, YearConvention, resolve_year_convention


def _require_entries(stream: CashFlowStream) -> None:
    if stream.n == 0:
        raise InvalidStreamError("empty stream: no dates or cash flows to discount")


def discount_factors_spread(
    stream: CashFlowStream,
    spread: float,
    year_convention: YearConvention,
) -> np.ndarray:
    """
    Cumulative simple-compounded discount factors at reference rate + spread.

      DF(t) = DF(t-1) / (1 + (L(t) + s) * (d(t) - d(t-1)) / basis),  d(-1) = 0, DF(-1) = 1
    """
    _require_entries(stream)
    basis = resolve_year_convention(year_convention)

    # a trial rate may push a period factor through zero; let inf/nan reach the solver
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        period_rates = stream.reference_rates + float(spread)
        growth = 1.0 + period_rates * stream.period_days / basis
        return 1.0 / np.cumprod(growth)


def discount_factors_flat_yield(stream: CashFlowStream, yield_: float) -> np.ndarray:
    """
    Actual/365 annually compounded discount factors, referenced to the FIRST
    cash flow date rather than day zero:

      DF(t) = (1 + y) ** -((d(t) - d(0)) / 365)
    """
    _require_entries(stream)
    taus = (stream.day_offsets - stream.day_offsets[0]) / IRR_YEAR_CONVENTION

    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        return 1.0 / np.power(1.0 + float(yield_), taus)


def _settle(pv: float, is_clean: bool, accrued_interest: float) -> float:
    if is_clean:
        pv -= accrued_interest
    return pv


def pv_spread(
    stream: CashFlowStream,
    spread: float,
    year_convention: YearConvention,
    is_clean: bool = False,
    accrued_interest: float = 0.0,
) -> float:
    """Dirty PV of the stream at reference rate + spread (clean if requested)."""
    dfs = discount_factors_spread(stream, spread, year_convention)
    with np.errstate(invalid="ignore", over="ignore"):
        pv = float(np.dot(stream.amounts, dfs))
    return _settle(pv, is_clean, accrued_interest)


def pv_flat_yield(
    stream: CashFlowStream,
    yield_: float,
    is_clean: bool = False,
    accrued_interest: float = 0.0,
) -> float:
    """PV of the stream at a flat Actual/365 annual yield (clean if requested)."""
    dfs = discount_factors_flat_yield(stream, yield_)
    with np.errstate(invalid="ignore", over="ignore"):
        pv = float(np.dot(stream.amounts, dfs))
    return _settle(pv, is_clean, accrued_interest)


class DiscountModel(ABC):
    """PV as a function of a single rate parameter; what the solver drives."""

    @abstractmethod
    def present_value(self, rate: float) -> float:
        ...

    def __call__(self, rate: float) -> float:
        return self.present_value(rate)


@dataclass(frozen=True)
class SpreadDiscountModel(DiscountModel):
    stream: CashFlowStream
    year_convention: float = 360.0
    is_clean: bool = False
    accrued_interest: float = 0.0

    def present_value(self, rate: float) -> float:
        return pv_spread(self.stream, rate, self.year_convention, self.is_clean, self.accrued_interest)


@dataclass(frozen=True)
class FlatYieldDiscountModel(DiscountModel):
    stream: CashFlowStream
    is_clean: bool = False
    accrued_interest: float = 0.0

    def present_value(self, rate: float) -> float:
        return pv_flat_yield(self.stream, rate, self.is_clean, self.accrued_interest)
