from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from .errors import InvalidStreamError
from .utils import YearConvention, resolve_year_convention, yearfrac_days

ArrayLike = Union[Sequence[float], np.ndarray]


def _as_vector(values: ArrayLike, name: str) -> np.ndarray:
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidStreamError(f"{name} must be a sequence of numbers") from exc

    if arr.ndim != 1:
        raise InvalidStreamError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidStreamError(f"{name} contains non-finite values")
    return arr


@dataclass(frozen=True)
class CashFlowStream:
    """
    Ordered cash flows paired with day offsets from the valuation date (day zero)
    and the reference rate fixing for each period.

    Invariants (checked by ``build``):
    - at least one entry, all arrays the same length
    - day offsets strictly increasing, first offset > 0
    - all values finite

    Arrays are private read-only copies, so a stream cannot change under a solve.
    """
    amounts: np.ndarray
    day_offsets: np.ndarray
    reference_rates: np.ndarray

    @classmethod
    def build(
        cls,
        amounts: ArrayLike,
        day_offsets: ArrayLike,
        reference_rates: Optional[ArrayLike] = None,
    ) -> "CashFlowStream":
        cfs = _as_vector(amounts, "amounts")
        days = _as_vector(day_offsets, "day_offsets")

        if reference_rates is None:
            rates = np.zeros_like(cfs)
        else:
            rates = _as_vector(reference_rates, "reference_rates")

        n = len(cfs)
        if n < 1:
            raise InvalidStreamError("valid stream of cash flows must have at least one entry")
        if len(days) != n or len(rates) != n:
            raise InvalidStreamError(
                f"Length mismatch: amounts={n}, day_offsets={len(days)}, reference_rates={len(rates)}"
            )

        # previous offset starts at day zero, so the first entry must be > 0
        prev = np.r_[0.0, days[:-1]]
        bad = np.where(days <= prev)[0]
        if len(bad) > 0:
            i = int(bad[0])
            raise InvalidStreamError(
                "day_offsets must be strictly increasing and start after day zero "
                f"(entry {i}: {days[i]} <= {prev[i]})"
            )

        for arr in (cfs, days, rates):
            arr.setflags(write=False)
        return cls(cfs, days, rates)

    def __len__(self) -> int:
        return len(self.amounts)

    @property
    def n(self) -> int:
        return len(self.amounts)

    @property
    def period_days(self) -> np.ndarray:
        """Days in each accrual period; the first is measured from day zero."""
        return np.diff(self.day_offsets, prepend=0.0)

    def year_fractions(self, year_convention: YearConvention) -> np.ndarray:
        return yearfrac_days(self.period_days, resolve_year_convention(year_convention))


def _as_float(value, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class PricingParameters:
    target_price: float = 0.0             # total dollar amount, not % of par
    residual_tolerance: float = 1e-8
    max_iterations: int = 100
    is_clean: bool = False
    accrued_interest: float = 0.0         # only used if is_clean
    year_convention: YearConvention = 360.0  # spread model only

    def __post_init__(self):
        tol = _as_float(self.residual_tolerance, "residual_tolerance")
        if not tol >= 0.0:
            raise ValueError(f"residual_tolerance must be >= 0, got {self.residual_tolerance!r}")

        max_iter = self.max_iterations
        if isinstance(max_iter, bool) or not isinstance(max_iter, numbers.Integral):
            raise ValueError(f"max_iterations must be an integer, got {max_iter!r}")
        if max_iter < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iter}")

        price = _as_float(self.target_price, "target_price")
        accrued = _as_float(self.accrued_interest, "accrued_interest")
        for name, value in (("target_price", price), ("accrued_interest", accrued)):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")

        object.__setattr__(self, "target_price", price)
        object.__setattr__(self, "residual_tolerance", tol)
        object.__setattr__(self, "max_iterations", int(max_iter))
        object.__setattr__(self, "is_clean", bool(self.is_clean))
        object.__setattr__(self, "accrued_interest", accrued)
        object.__setattr__(self, "year_convention", resolve_year_convention(self.year_convention))
