from __future__ import annotations

import pytest

from app.core.config import AnalyticsSettings
from app.core.replenishment.domain import (
    Confidence,
    DemandPoint,
    ForecastMethod,
    InsufficientDataError,
    InvalidParameterError,
    MethodChoice,
    ProductDemandProfile,
)
from app.core.replenishment.forecast import build_forecast
from app.core.replenishment.seasonality import shift_month


def _profile(**kwargs) -> ProductDemandProfile:
    return ProductDemandProfile(id=7, sku="SKU-7", name="Gadget", **kwargs)


def _history(start: str, quantities: list[int]) -> list[DemandPoint]:
    return [DemandPoint(month=shift_month(start, i), quantity=q) for i, q in enumerate(quantities)]


TRENDING = _history("2024-01", [100, 120, 140])


def test_stable_product_gets_flat_moving_average():
    result = build_forecast(_profile(xyz_grade="X"), TRENDING)

    assert result.method == ForecastMethod.SMA
    assert result.parameters == {"window_size": 3}
    assert result.is_manual is False
    assert result.seasonally_adjusted is False
    assert [p.quantity for p in result.predicted] == [120, 120, 120]
    assert [p.month for p in result.predicted] == ["2024-04", "2024-05", "2024-06"]
    assert result.mape == 21.4
    assert result.confidence == Confidence.MEDIUM


def test_trending_product_gets_rising_forecast():
    result = build_forecast(_profile(xyz_grade="X", yoy_growth_rate=30.0), TRENDING)

    assert result.method == ForecastMethod.HOLTS
    predicted = [p.quantity for p in result.predicted]
    assert predicted == [160, 180, 200]
    assert predicted[1] > 140
    assert "significant YoY change" in result.selection_reason


def test_manual_method_overrides_selection():
    choice = MethodChoice(ForecastMethod.SES, alpha=0.3)

    result = build_forecast(_profile(xyz_grade="X", is_overstock=True), TRENDING, manual_choice=choice)

    assert result.is_manual is True
    assert result.method == ForecastMethod.SES
    assert result.parameters == {"alpha": 0.3}
    assert result.selection_reason == "manually selected"
    # No overstock damping on manual forecasts.
    assert [p.quantity for p in result.predicted] == [116, 116, 116]


def test_manual_parameters_are_validated():
    with pytest.raises(InvalidParameterError):
        build_forecast(
            _profile(),
            TRENDING,
            manual_choice=MethodChoice(ForecastMethod.HOLTS, alpha=0.3, beta=0.0),
        )


def test_manual_croston_is_available():
    history = _history("2024-01", [10, 0, 10, 0, 10])

    result = build_forecast(
        _profile(),
        history,
        manual_choice=MethodChoice(ForecastMethod.CROSTON, alpha=0.15),
    )

    assert result.method == ForecastMethod.CROSTON
    assert [p.quantity for p in result.predicted] == [5, 5, 5]


def test_overstock_damps_automatic_forecast():
    result = build_forecast(_profile(xyz_grade="X", is_overstock=True), TRENDING)

    assert [p.quantity for p in result.predicted] == [108, 108, 108]
    assert "overstock damping x0.9" in result.selection_reason


def test_seasonal_history_is_adjusted():
    history = _history("2023-01", ([100] * 10 + [300, 300]) * 2)

    result = build_forecast(_profile(xyz_grade="X"), history)

    assert result.seasonally_adjusted is True
    assert [p.month for p in result.predicted] == ["2025-01", "2025-02", "2025-03"]
    assert [p.quantity for p in result.predicted] == [100, 100, 100]
    assert result.selection_reason.endswith("+ seasonal adjustment")


def test_seasonal_adjustment_needs_enough_history():
    history = _history("2023-01", ([100] * 10 + [300, 300]) * 2)
    settings = AnalyticsSettings(seasonal_min_months=36)

    result = build_forecast(_profile(xyz_grade="X"), history, settings)

    assert result.seasonally_adjusted is False
    assert [p.quantity for p in result.predicted] == [233, 233, 233]


def test_horizon_is_configurable():
    result = build_forecast(_profile(xyz_grade="Y"), TRENDING, AnalyticsSettings(forecast_horizon_months=5))

    assert len(result.predicted) == 5


@pytest.mark.parametrize("quantities", [[], [42]])
def test_too_short_history_is_rejected(quantities):
    with pytest.raises(InsufficientDataError):
        build_forecast(_profile(xyz_grade="X"), _history("2024-01", quantities))


def test_history_is_returned_unchanged():
    result = build_forecast(_profile(xyz_grade="Z"), TRENDING)

    assert result.history == TRENDING


def test_forecast_is_deterministic():
    history = _history("2023-05", [12, 0, 30, 18, 25, 9, 14, 40])
    profile = _profile(xyz_grade="Z", yoy_growth_rate=3.0)

    assert build_forecast(profile, history) == build_forecast(profile, history)
