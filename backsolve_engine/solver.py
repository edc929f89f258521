"""Secant root finder shared by the spread and IRR backsolvers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from .errors import DegenerateStepError, NonConvergenceError
from .utils import within_tolerance

logger = logging.getLogger(__name__)

Func = Callable[[float], float]

INITIAL_GUESS = 0.06  # 6%
INITIAL_STEP = 0.0025  # second seed at 6.25%


@dataclass(frozen=True)
class SecantResult:
    root: float
    iterations: int
    residual: float


def secant(
    func: Func,
    residual_tolerance: float,
    max_iterations: int,
    x0: float = INITIAL_GUESS,
    x1: float = INITIAL_GUESS + INITIAL_STEP,
) -> SecantResult:
    """
    Drive ``func`` to zero with the secant method.

    Parameters
    ----------
    func:
        Scalar objective, e.g. ``lambda x: target - pv(x)``.
    residual_tolerance:
        Success once ``|func(x)| <= residual_tolerance``.
    max_iterations:
        Maximum number of secant steps.
    x0, x1:
        Seed points. Rate magnitudes are assumed, hence 6% / 6.25%.

    Raises
    ------
    DegenerateStepError
        Two consecutive residuals are exactly equal (zero secant slope).
    NonConvergenceError
        Tolerance not met within ``max_iterations`` steps, or the residual
        became non-finite.
    """
    x_prev, x = float(x0), float(x1)
    f_prev = func(x_prev)
    f = func(x)

    trials = 0
    while True:
        if not math.isfinite(f):
            raise NonConvergenceError(
                f"objective is non-finite at x={x!r} after {trials} iterations",
                x=x, residual=f, iterations=trials,
            )
        if within_tolerance(f, residual_tolerance):
            logger.debug("Secant converged: x=%s residual=%s iterations=%s", x, f, trials)
            return SecantResult(x, trials, f)
        if trials >= max_iterations:
            raise NonConvergenceError(
                f"failed to converge in {max_iterations} iterations (x={x!r}, residual={f!r})",
                x=x, residual=f, iterations=trials,
            )
        if not math.isfinite(f_prev):
            raise NonConvergenceError(
                f"objective is non-finite at x={x_prev!r} after {trials} iterations",
                x=x_prev, residual=f_prev, iterations=trials,
            )
        # exact equality on purpose: the trial rate did not move the objective at all
        if f == f_prev:
            raise DegenerateStepError(
                "value doesn't change when rate is sensitized",
                x=x, residual=f, iterations=trials,
            )

        x_next = x - f * (x - x_prev) / (f - f_prev)
        x_prev, f_prev = x, f
        x = x_next
        f = func(x)
        trials += 1
        logger.debug("Secant iter %s: x=%s residual=%s", trials, x, f)
