import numpy as np
import pytest

from backsolve_engine.cashflows import CashFlowStream
from backsolve_engine.discount import (
    FlatYieldDiscountModel,
    SpreadDiscountModel,
    discount_factors_flat_yield,
    discount_factors_spread,
    pv_flat_yield,
    pv_spread,
)
from backsolve_engine.errors import InvalidStreamError


@pytest.fixture(scope="module")
def floater():
    """Two-year quarterly-ish floater: 4 coupons of 1.0 plus 100 redemption at the end."""
    return CashFlowStream.build(
        amounts=[1.0, 1.0, 1.0, 101.0],
        day_offsets=[91, 182, 273, 365],
        reference_rates=[0.040, 0.041, 0.042, 0.043],
    )


def test_spread_discount_factors_compound_period_by_period():
    stream = CashFlowStream.build([0.0, 100.0], [90, 180], [0.04, 0.05])
    dfs = discount_factors_spread(stream, 0.0, 360)
    df1 = 1.0 / (1.0 + 0.04 * 90 / 360)
    df2 = df1 / (1.0 + 0.05 * 90 / 360)
    assert dfs == pytest.approx([df1, df2], rel=1e-14)


def test_pv_spread_single_period():
    stream = CashFlowStream.build([100.0], [180], [0.05])
    pv = pv_spread(stream, 0.01, 360)
    assert pv == pytest.approx(100.0 / 1.03, rel=1e-14)


def test_pv_spread_decreases_with_spread(floater):
    pvs = [pv_spread(floater, s, 360) for s in (0.0, 0.005, 0.01, 0.02)]
    assert all(a > b for a, b in zip(pvs, pvs[1:])), "PV must fall as spread widens"


def test_clean_pv_is_dirty_minus_accrued(floater):
    dirty = pv_spread(floater, 0.0125, 360)
    clean = pv_spread(floater, 0.0125, 360, is_clean=True, accrued_interest=0.75)
    assert clean == pytest.approx(dirty - 0.75, abs=1e-12)

    dirty_y = pv_flat_yield(floater, 0.05)
    clean_y = pv_flat_yield(floater, 0.05, is_clean=True, accrued_interest=0.75)
    assert clean_y == pytest.approx(dirty_y - 0.75, abs=1e-12)


def test_accrued_ignored_when_dirty(floater):
    assert pv_spread(floater, 0.01, 360, is_clean=False, accrued_interest=5.0) == pv_spread(floater, 0.01, 360)


def test_year_convention_by_name_matches_number(floater):
    assert pv_spread(floater, 0.01, "ACT/360") == pv_spread(floater, 0.01, 360.0)


def test_flat_yield_referenced_to_first_cashflow_date():
    stream = CashFlowStream.build([-100.0, 110.0], [100, 465])
    dfs = discount_factors_flat_yield(stream, 0.10)
    assert dfs[0] == 1.0, "first cash flow is the reference date"
    assert dfs[1] == pytest.approx(1.0 / 1.1, rel=1e-14)
    assert pv_flat_yield(stream, 0.10) == pytest.approx(0.0, abs=1e-12)


def test_flat_yield_invariant_to_shifting_all_dates():
    a = CashFlowStream.build([-100.0, 6.0, 106.0], [1, 366, 731])
    b = CashFlowStream.build([-100.0, 6.0, 106.0], [500, 865, 1230])
    assert pv_flat_yield(a, 0.06) == pytest.approx(pv_flat_yield(b, 0.06), rel=1e-14)


def test_flat_yield_ignores_reference_rates():
    a = CashFlowStream.build([-100.0, 110.0], [10, 375])
    b = CashFlowStream.build([-100.0, 110.0], [10, 375], [0.5, 0.5])
    assert pv_flat_yield(a, 0.07) == pv_flat_yield(b, 0.07)


def test_models_delegate_to_functions(floater):
    spread_model = SpreadDiscountModel(floater, year_convention=360.0, is_clean=True, accrued_interest=0.3)
    assert spread_model.present_value(0.01) == pv_spread(floater, 0.01, 360.0, True, 0.3)
    assert spread_model(0.01) == spread_model.present_value(0.01)

    yield_model = FlatYieldDiscountModel(floater)
    assert yield_model.present_value(0.04) == pv_flat_yield(floater, 0.04)


def test_empty_stream_signals_instead_of_returning_number():
    empty = CashFlowStream(np.array([]), np.array([]), np.array([]))
    with pytest.raises(InvalidStreamError):
        pv_spread(empty, 0.01, 360)
    with pytest.raises(InvalidStreamError):
        pv_flat_yield(empty, 0.01)


def test_pathological_rate_yields_non_finite_pv_without_warning(floater):
    # 1 + y < 0 with fractional exponents has no real value
    with np.errstate(all="raise"):
        pv = pv_flat_yield(floater, -2.0)
    assert not np.isfinite(pv)
