from __future__ import annotations

from typing import Optional, Sequence

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import BacktestResult, Confidence, MethodChoice
from app.core.replenishment.methods import MIN_POINTS, run_method
from app.core.replenishment.rounding import round_half_up


def confidence_for(
    mape: Optional[float],
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> Confidence:
    if mape is None:
        return Confidence.LOW
    if mape < settings.confidence_high_mape:
        return Confidence.HIGH
    if mape < settings.confidence_medium_mape:
        return Confidence.MEDIUM
    return Confidence.LOW


def mape(actuals: Sequence[float], forecasts: Sequence[float]) -> Optional[float]:
    """Mean absolute percentage error over points with a non-zero actual."""

    errors = [
        abs(a - f) / a
        for a, f in zip(actuals, forecasts)
        if a != 0
    ]
    if not errors:
        return None
    return sum(errors) / len(errors) * 100.0


def backtest(
    values: Sequence[float],
    choice: MethodChoice,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> BacktestResult:
    """One-step-ahead backtest of ``choice`` on the tail of ``values``.

    Each withheld month is forecast from the history before it. With at
    least ``backtest_origins`` usable origins the errors are averaged
    (rolling origin); otherwise only the last month is scored.
    """

    available = len(values) - MIN_POINTS
    if available <= 0:
        return BacktestResult(mape=None, confidence=Confidence.LOW, points_evaluated=0)

    origins = settings.backtest_origins if available >= settings.backtest_origins else 1

    actuals: list[float] = []
    forecasts: list[float] = []
    for origin in range(len(values) - origins, len(values)):
        predicted = run_method(choice, values[:origin], 1)[0]
        actuals.append(float(values[origin]))
        forecasts.append(predicted)

    score = mape(actuals, forecasts)
    if score is None:
        return BacktestResult(mape=None, confidence=Confidence.LOW, points_evaluated=0)

    score = round_half_up(score, 1)
    evaluated = sum(1 for a in actuals if a != 0)
    return BacktestResult(
        mape=score,
        confidence=confidence_for(score, settings),
        points_evaluated=evaluated,
    )
