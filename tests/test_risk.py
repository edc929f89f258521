import numpy as np
import pytest

from backsolve_engine.cashflows import CashFlowStream
from backsolve_engine.discount import FlatYieldDiscountModel, SpreadDiscountModel
from backsolve_engine.risk import pv_profile, spread_dv01, spread_duration, yield_dv01


@pytest.fixture(scope="module")
def note():
    """Three-year annual-pay note, 5% coupon on 100."""
    return CashFlowStream.build(
        [5.0, 5.0, 105.0],
        [365, 730, 1095],
        [0.035, 0.037, 0.039],
    )


def test_spread_dv01_negative_for_long_only_stream(note):
    """+1bp spread => price down."""
    assert spread_dv01(note, 0.01, 360) < 0.0


def test_spread_dv01_scales_with_bump(note):
    one = spread_dv01(note, 0.01, 360, bp=1.0)
    ten = spread_dv01(note, 0.01, 360, bp=10.0)
    assert ten == pytest.approx(10 * one, rel=1e-2)


def test_yield_dv01_negative(note):
    assert yield_dv01(note, 0.05) < 0.0


def test_spread_duration_plausible(note):
    dur = spread_duration(note, 0.01, 360)
    # positive and shorter than the final cash flow date in years
    assert 0.0 < dur < 1095 / 360


def test_spread_duration_zero_pv_raises():
    flat = CashFlowStream.build([0.0], [365])
    with pytest.raises(ValueError):
        spread_duration(flat, 0.01, 360)


def test_pv_profile_monotone(note):
    prof = pv_profile(SpreadDiscountModel(note, year_convention=360.0), np.linspace(-0.01, 0.10, 12))
    assert list(prof.columns) == ["rate", "pv"]
    assert np.all(np.diff(prof["pv"].to_numpy()) < 0.0), "PV must fall as spread rises"


def test_pv_profile_brackets_irr_sign_change():
    deal = CashFlowStream.build([-100.0, 110.0], [100, 465])
    prof = pv_profile(FlatYieldDiscountModel(deal), [0.05, 0.15])
    assert prof["pv"].iloc[0] > 0.0 > prof["pv"].iloc[1]
