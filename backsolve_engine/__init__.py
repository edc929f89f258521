"""
Cash Flow Backsolve Engine

Modules:
- cashflows: validated cash flow stream + pricing parameters
- discount: spread-over-reference and flat-yield (IRR) present value models
- solver: secant root finder
- backsolve: spread / yield / IRR backsolvers and public entry points
- portfolio: table-level solving over many streams + QC report
- risk: spread / yield DV01 and duration
- errors: named failure kinds
"""

from .backsolve import backsolve_irr, backsolve_spread, backsolve_yield, solve_irr, solve_spread
from .cashflows import CashFlowStream, PricingParameters
from .errors import BacksolveError, DegenerateStepError, InvalidStreamError, NonConvergenceError

__all__ = [
    "backsolve_irr",
    "backsolve_spread",
    "backsolve_yield",
    "solve_irr",
    "solve_spread",
    "CashFlowStream",
    "PricingParameters",
    "BacksolveError",
    "DegenerateStepError",
    "InvalidStreamError",
    "NonConvergenceError",
]
