from __future__ import annotations

import logging

from .cashflows import ArrayLike, CashFlowStream, PricingParameters
from .discount import DiscountModel, FlatYieldDiscountModel, SpreadDiscountModel
from .solver import SecantResult, secant
from .utils import YearConvention

logger = logging.getLogger(__name__)


def _solve_to_target(model: DiscountModel, target: float, params: PricingParameters) -> SecantResult:
    def objective(x: float) -> float:
        return target - model.present_value(x)

    return secant(objective, params.residual_tolerance, params.max_iterations)


def solve_spread(stream: CashFlowStream, params: PricingParameters) -> float:
    """
    Spread over the reference rates at which the stream's PV equals
    ``params.target_price`` (a total dollar amount, not % of par).

    With all-zero reference rates the result is a yield.
    """
    model = SpreadDiscountModel(
        stream,
        year_convention=params.year_convention,
        is_clean=params.is_clean,
        accrued_interest=params.accrued_interest,
    )
    result = _solve_to_target(model, params.target_price, params)
    logger.debug("Spread backsolve: n=%s target=%s spread=%s iterations=%s",
                 stream.n, params.target_price, result.root, result.iterations)
    return result.root


def solve_irr(stream: CashFlowStream, params: PricingParameters) -> float:
    """
    Flat Actual/365 annual yield at which the stream's NPV is zero.

    ``params.target_price`` and ``params.year_convention`` are ignored; reference
    rates on the stream are unused.
    """
    model = FlatYieldDiscountModel(
        stream,
        is_clean=params.is_clean,
        accrued_interest=params.accrued_interest,
    )
    result = _solve_to_target(model, 0.0, params)
    logger.debug("IRR backsolve: n=%s irr=%s iterations=%s", stream.n, result.root, result.iterations)
    return result.root


def backsolve_spread(
    amounts: ArrayLike,
    day_offsets: ArrayLike,
    reference_rates: ArrayLike,
    target_price: float,
    residual_tolerance: float = 1e-8,
    max_iterations: int = 100,
    is_clean: bool = False,
    accrued_interest: float = 0.0,
    year_convention: YearConvention = 360.0,
) -> float:
    """
    Backsolve the discount spread over the reference rates that prices the cash
    flows at ``target_price``.

    Inputs are validated before any solving: InvalidStreamError for a bad
    stream, ValueError for bad parameters. Solver failures propagate as
    DegenerateStepError / NonConvergenceError.
    """
    stream = CashFlowStream.build(amounts, day_offsets, reference_rates)
    params = PricingParameters(
        target_price=target_price,
        residual_tolerance=residual_tolerance,
        max_iterations=max_iterations,
        is_clean=is_clean,
        accrued_interest=accrued_interest,
        year_convention=year_convention,
    )
    return solve_spread(stream, params)


def backsolve_yield(
    amounts: ArrayLike,
    day_offsets: ArrayLike,
    target_price: float,
    residual_tolerance: float = 1e-8,
    max_iterations: int = 100,
    is_clean: bool = False,
    accrued_interest: float = 0.0,
    year_convention: YearConvention = 360.0,
) -> float:
    """Fixed-rate case: ``backsolve_spread`` against an all-zero reference curve."""
    stream = CashFlowStream.build(amounts, day_offsets, reference_rates=None)
    params = PricingParameters(
        target_price=target_price,
        residual_tolerance=residual_tolerance,
        max_iterations=max_iterations,
        is_clean=is_clean,
        accrued_interest=accrued_interest,
        year_convention=year_convention,
    )
    return solve_spread(stream, params)


def backsolve_irr(
    amounts: ArrayLike,
    day_offsets: ArrayLike,
    residual_tolerance: float = 1e-8,
    max_iterations: int = 100,
    is_clean: bool = False,
    accrued_interest: float = 0.0,
) -> float:
    """
    IRR of the cash flows (Actual/365, annual compounding, measured from the
    first cash flow date).
    """
    stream = CashFlowStream.build(amounts, day_offsets)
    params = PricingParameters(
        target_price=0.0,
        residual_tolerance=residual_tolerance,
        max_iterations=max_iterations,
        is_clean=is_clean,
        accrued_interest=accrued_interest,
    )
    return solve_irr(stream, params)
