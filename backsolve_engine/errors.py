from __future__ import annotations

from typing import Optional


class BacksolveError(RuntimeError):
    """Base class for all named failures raised by the backsolve engine."""

    kind = "BACKSOLVE_ERROR"


class InvalidStreamError(BacksolveError, ValueError):
    """
    Cash-flow stream rejected at the boundary: empty, mismatched lengths,
    non-finite values, or day offsets not strictly increasing from day zero.
    """

    kind = "INVALID_STREAM"


class _SolverFailure(BacksolveError):
    def __init__(
        self,
        message: str,
        x: Optional[float] = None,
        residual: Optional[float] = None,
        iterations: int = 0,
    ):
        super().__init__(message)
        self.x = x
        self.residual = residual
        self.iterations = iterations


class DegenerateStepError(_SolverFailure, ZeroDivisionError):
    """Two consecutive residuals were identical, so the secant slope is undefined."""

    kind = "DEGENERATE_STEP"


class NonConvergenceError(_SolverFailure):
    """Iteration cap exhausted (or residual went non-finite) before meeting the tolerance."""

    kind = "NON_CONVERGENCE"
