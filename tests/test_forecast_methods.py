from __future__ import annotations

import pytest

from app.core.replenishment.domain import (
    ForecastMethod,
    InsufficientDataError,
    InvalidParameterError,
    MethodChoice,
)
from app.core.replenishment.methods import croston, holts, run_method, ses, sma, validate_choice


HISTORY = [100, 120, 140]


def test_sma_is_flat_mean_of_window():
    assert sma(HISTORY, window_size=3, horizon=3) == pytest.approx([120.0, 120.0, 120.0])


def test_sma_window_larger_than_history_is_clamped():
    """SMA(12) over a 3-month series behaves exactly like SMA(3)."""
    assert sma(HISTORY, window_size=12, horizon=3) == sma(HISTORY, window_size=3, horizon=3)


def test_sma_uses_only_last_points():
    assert sma([10, 10, 40, 60], window_size=2, horizon=1) == pytest.approx([50.0])


def test_ses_seeded_with_first_value():
    # s = 100 -> 106 -> 116.2
    assert ses(HISTORY, alpha=0.3, horizon=2) == pytest.approx([116.2, 116.2])


def test_holts_extrapolates_trend():
    forecast = holts(HISTORY, alpha=0.3, beta=0.1, horizon=3)

    assert forecast == pytest.approx([160.0, 180.0, 200.0])
    assert forecast[1] > 140
    assert forecast[0] < forecast[1] < forecast[2]


def test_holts_never_negative():
    forecast = holts([300, 150, 20], alpha=0.5, beta=0.5, horizon=6)

    assert all(v >= 0.0 for v in forecast)
    assert forecast[-1] == 0.0


@pytest.mark.parametrize(
    "call",
    [
        lambda: sma([5], window_size=2, horizon=3),
        lambda: ses([5], alpha=0.3, horizon=3),
        lambda: holts([], alpha=0.3, beta=0.1, horizon=3),
        lambda: croston([7], alpha=0.15, horizon=3),
    ],
)
def test_fewer_than_two_points_is_insufficient(call):
    with pytest.raises(InsufficientDataError):
        call()


@pytest.mark.parametrize(
    "choice",
    [
        MethodChoice(ForecastMethod.SMA, window_size=1),
        MethodChoice(ForecastMethod.SMA),
        MethodChoice(ForecastMethod.SES, alpha=0.0),
        MethodChoice(ForecastMethod.SES, alpha=1.0),
        MethodChoice(ForecastMethod.HOLTS, alpha=0.3, beta=1.2),
        MethodChoice(ForecastMethod.HOLTS, alpha=0.3),
        MethodChoice(ForecastMethod.CROSTON, alpha=-0.1),
    ],
)
def test_invalid_parameters_rejected_before_computation(choice):
    with pytest.raises(InvalidParameterError):
        validate_choice(choice)
    # Parameter errors win over data errors: nothing is computed.
    with pytest.raises(InvalidParameterError):
        run_method(choice, [1], 3)


def test_croston_smooths_size_and_interval():
    # Non-zero demands 10, 10, 10 every second month -> 10 / 2 per month.
    forecast = croston([10, 0, 10, 0, 10], alpha=0.15, horizon=2)

    assert forecast == pytest.approx([5.0, 5.0])


def test_croston_falls_back_to_mean_for_single_demand():
    assert croston([0, 0, 9], alpha=0.15, horizon=1) == pytest.approx([3.0])


def test_run_method_dispatches_on_choice():
    choice = MethodChoice(ForecastMethod.HOLTS, alpha=0.3, beta=0.1)

    assert run_method(choice, HISTORY, 2) == holts(HISTORY, 0.3, 0.1, 2)


def test_methods_are_deterministic():
    values = [13, 0, 27, 31, 8, 19, 22]
    for choice in (
        MethodChoice(ForecastMethod.SMA, window_size=4),
        MethodChoice(ForecastMethod.SES, alpha=0.45),
        MethodChoice(ForecastMethod.HOLTS, alpha=0.2, beta=0.3),
        MethodChoice(ForecastMethod.CROSTON, alpha=0.2),
    ):
        assert run_method(choice, values, 3) == run_method(choice, values, 3)
