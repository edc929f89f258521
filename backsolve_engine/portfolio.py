from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .backsolve import solve_irr, solve_spread
from .cashflows import CashFlowStream, PricingParameters
from .discount import discount_factors_spread
from .errors import BacksolveError
from .utils import YearConvention, resolve_year_convention

logger = logging.getLogger(__name__)

CASHFLOW_COLUMNS = ["stream_id", "day_offset", "amount"]


def qc_flags_for_stream(stream: CashFlowStream) -> List[str]:
    flags: List[str] = []

    if np.all(stream.amounts == 0.0):
        flags.append("ZERO_CASHFLOWS")

    if not (np.any(stream.amounts > 0.0) and np.any(stream.amounts < 0.0)):
        flags.append("NO_SIGN_CHANGE")

    if np.any(stream.reference_rates < 0.0):
        flags.append("NEGATIVE_REF_RATE")

    return flags


def build_stream_table(cashflows: pd.DataFrame) -> pd.DataFrame:
    """
    Normalise a long cash flow table: one row per (stream_id, day_offset) with
    the amount and, optionally, the reference rate for that period
    (missing -> 0.0). Sorted by stream then date.
    """
    missing = [c for c in CASHFLOW_COLUMNS if c not in cashflows.columns]
    if missing:
        raise ValueError(f"Cash flow table missing columns: {missing}")

    out = cashflows.copy()
    if "reference_rate" not in out.columns:
        out["reference_rate"] = 0.0

    out["stream_id"] = out["stream_id"].astype(str)
    for col in ("day_offset", "amount", "reference_rate"):
        out[col] = out[col].astype(float)

    cols = CASHFLOW_COLUMNS + ["reference_rate"]
    return out[cols].sort_values(["stream_id", "day_offset"], kind="stable").reset_index(drop=True)


def _streams_by_id(table: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    return {str(k): g for k, g in table.groupby("stream_id", sort=False)}


def _stream_from_rows(rows: Optional[pd.DataFrame]) -> CashFlowStream:
    if rows is None:
        return CashFlowStream.build([], [])
    return CashFlowStream.build(
        rows["amount"].to_numpy(),
        rows["day_offset"].to_numpy(),
        rows["reference_rate"].to_numpy(),
    )


def _cell(row: pd.Series, col: str, default, cast):
    # columns set on only some rows arrive as NaN elsewhere
    value = row.get(col, default)
    return default if pd.isna(value) else cast(value)


def backsolve_spread_table(
    cashflows: pd.DataFrame,
    targets: pd.DataFrame,
    residual_tolerance: float = 1e-8,
    max_iterations: int = 100,
    year_convention: YearConvention = 360.0,
) -> pd.DataFrame:
    """
    Solve one spread per row of ``targets`` (columns ``stream_id``,
    ``target_price`` and optionally ``is_clean`` / ``accrued_interest``),
    using that stream's rows of ``cashflows``.

    A failed solve does not abort the table: its ``spread`` is NaN and
    ``error`` holds the failure kind (e.g. ``NON_CONVERGENCE``).
    """
    if "stream_id" not in targets.columns or "target_price" not in targets.columns:
        raise ValueError("Targets table needs 'stream_id' and 'target_price' columns.")

    by_id = _streams_by_id(build_stream_table(cashflows))
    basis = resolve_year_convention(year_convention)

    rows = []
    for _, t in targets.iterrows():
        sid = str(t["stream_id"])
        params = PricingParameters(
            target_price=float(t["target_price"]),
            residual_tolerance=residual_tolerance,
            max_iterations=max_iterations,
            is_clean=_cell(t, "is_clean", False, bool),
            accrued_interest=_cell(t, "accrued_interest", 0.0, float),
            year_convention=basis,
        )

        spread, error, flags, n = np.nan, "", "", 0
        try:
            stream = _stream_from_rows(by_id.get(sid))
            n = stream.n
            flags = "|".join(qc_flags_for_stream(stream))
            spread = solve_spread(stream, params)
        except BacksolveError as exc:
            logger.warning("Spread backsolve failed for %s: %s", sid, exc)
            error = exc.kind

        rows.append((sid, n, params.target_price, spread, error, flags))

    return pd.DataFrame(rows, columns=["stream_id", "n_cashflows", "target_price", "spread", "error", "flags"])


def backsolve_irr_table(
    cashflows: pd.DataFrame,
    residual_tolerance: float = 1e-8,
    max_iterations: int = 100,
) -> pd.DataFrame:
    """IRR per ``stream_id``; failures recorded in the ``error`` column."""
    params = PricingParameters(residual_tolerance=residual_tolerance, max_iterations=max_iterations)

    rows = []
    for sid, g in _streams_by_id(build_stream_table(cashflows)).items():
        irr, error, flags = np.nan, "", ""
        try:
            stream = _stream_from_rows(g)
            flags = "|".join(qc_flags_for_stream(stream))
            irr = solve_irr(stream, params)
        except BacksolveError as exc:
            logger.warning("IRR backsolve failed for %s: %s", sid, exc)
            error = exc.kind

        rows.append((sid, len(g), irr, error, flags))

    return pd.DataFrame(rows, columns=["stream_id", "n_cashflows", "irr", "error", "flags"])


def stream_qc_report(stream: CashFlowStream, spread: float, year_convention: YearConvention = 360.0) -> pd.DataFrame:
    """Per-cash-flow breakdown of the spread-model PV at ``spread``."""
    basis = resolve_year_convention(year_convention)
    dfs = discount_factors_spread(stream, spread, basis)

    return pd.DataFrame(
        {
            "day_offset": stream.day_offsets,
            "period_days": stream.period_days,
            "year_frac": stream.year_fractions(basis),
            "reference_rate": stream.reference_rates,
            "period_rate": stream.reference_rates + spread,
            "amount": stream.amounts,
            "df": dfs,
            "pv_cf": stream.amounts * dfs,
            "df_positive": dfs > 0,
        }
    )
