from __future__ import annotations

from typing import List, Optional, Sequence

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.accuracy import backtest
from app.core.replenishment.domain import (
    DemandPoint,
    ForecastResult,
    InsufficientDataError,
    MethodChoice,
    ProductDemandProfile,
)
from app.core.replenishment.methods import MIN_POINTS, run_method, validate_choice
from app.core.replenishment.rounding import round_int
from app.core.replenishment.seasonality import (
    deseasonalise,
    detect_seasonality,
    reseasonalise,
    shift_month,
)
from app.core.replenishment.selector import select_method


MANUAL_REASON = "manually selected"


def _predicted_series(last_month: str, values: Sequence[float]) -> List[DemandPoint]:
    return [
        DemandPoint(month=shift_month(last_month, h), quantity=max(round_int(v), 0))
        for h, v in enumerate(values, start=1)
    ]


def build_forecast(
    profile: ProductDemandProfile,
    history: Sequence[DemandPoint],
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
    manual_choice: Optional[MethodChoice] = None,
) -> ForecastResult:
    """Select (or accept) a method, forecast the horizon and score it.

    Raises InsufficientDataError for fewer than two months of history and
    InvalidParameterError for out-of-range manual parameters.
    """

    history = list(history)
    if len(history) < MIN_POINTS:
        raise InsufficientDataError(
            f"At least {MIN_POINTS} months of history are required, got {len(history)}"
        )

    horizon = settings.forecast_horizon_months
    values = [float(p.quantity) for p in history]
    last_month = history[-1].month

    if manual_choice is not None:
        validate_choice(manual_choice)
        forecast = run_method(manual_choice, values, horizon)
        accuracy = backtest(values, manual_choice, settings)
        return ForecastResult(
            method=manual_choice.method,
            parameters=manual_choice.parameters(),
            is_manual=True,
            seasonally_adjusted=False,
            confidence=accuracy.confidence,
            mape=accuracy.mape,
            selection_reason=MANUAL_REASON,
            history=history,
            predicted=_predicted_series(last_month, forecast),
        )

    selection = select_method(profile, len(history), settings)
    choice = selection.choice
    reason = selection.reason

    indices = detect_seasonality(history, settings)
    if indices is not None:
        adjusted = deseasonalise(history, indices)
        forecast = reseasonalise(run_method(choice, adjusted, horizon), last_month, indices)
        reason += " + seasonal adjustment"
    else:
        forecast = run_method(choice, values, horizon)

    if profile.is_overstock:
        forecast = [v * settings.overstock_forecast_factor for v in forecast]
        reason += f" + overstock damping x{settings.overstock_forecast_factor:g}"

    accuracy = backtest(values, choice, settings)

    return ForecastResult(
        method=choice.method,
        parameters=choice.parameters(),
        is_manual=False,
        seasonally_adjusted=indices is not None,
        confidence=accuracy.confidence,
        mape=accuracy.mape,
        selection_reason=reason,
        history=history,
        predicted=_predicted_series(last_month, forecast),
    )
