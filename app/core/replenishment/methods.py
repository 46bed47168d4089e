"""Point forecast methods over a monthly demand series.

Every method takes the raw monthly quantities (oldest first) and returns
``horizon`` non-negative floats. Parameters are validated before any
computation.
"""

from __future__ import annotations

from typing import List, Sequence

from app.core.replenishment.domain import (
    ForecastMethod,
    InsufficientDataError,
    InvalidParameterError,
    MethodChoice,
)


MIN_POINTS = 2


def _require_history(values: Sequence[float]) -> None:
    if len(values) < MIN_POINTS:
        raise InsufficientDataError(
            f"At least {MIN_POINTS} months of history are required, got {len(values)}"
        )


def _require_smoothing(name: str, value: float | None) -> float:
    if value is None or not 0.0 < value < 1.0:
        raise InvalidParameterError(f"{name} must be within (0, 1), got {value}")
    return float(value)


def _require_horizon(horizon: int) -> None:
    if horizon < 1:
        raise InvalidParameterError(f"horizon must be >= 1, got {horizon}")


def sma(values: Sequence[float], window_size: int, horizon: int) -> List[float]:
    """Simple moving average; the window is clamped to the available history."""

    if window_size is None or window_size < 2:
        raise InvalidParameterError(f"window_size must be >= 2, got {window_size}")
    _require_horizon(horizon)
    _require_history(values)

    window = min(window_size, len(values))
    tail = values[-window:]
    mean = sum(tail) / float(window)
    return [mean] * horizon


def ses(values: Sequence[float], alpha: float, horizon: int) -> List[float]:
    alpha = _require_smoothing("alpha", alpha)
    _require_horizon(horizon)
    _require_history(values)

    smoothed = float(values[0])
    for x in values[1:]:
        smoothed = alpha * float(x) + (1.0 - alpha) * smoothed
    return [max(smoothed, 0.0)] * horizon


def holts(values: Sequence[float], alpha: float, beta: float, horizon: int) -> List[float]:
    """Holt's double exponential smoothing with linear trend extrapolation."""

    alpha = _require_smoothing("alpha", alpha)
    beta = _require_smoothing("beta", beta)
    _require_horizon(horizon)
    _require_history(values)

    level = float(values[0])
    trend = float(values[1]) - float(values[0])
    for x in values[1:]:
        prev_level = level
        level = alpha * float(x) + (1.0 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1.0 - beta) * trend

    return [max(level + h * trend, 0.0) for h in range(1, horizon + 1)]


def croston(values: Sequence[float], alpha: float, horizon: int) -> List[float]:
    """Croston's method for intermittent demand.

    Demand sizes and inter-demand intervals are smoothed separately; the
    forecast is size / interval. With fewer than two non-zero demands the
    series mean is used instead.
    """

    alpha = _require_smoothing("alpha", alpha)
    _require_horizon(horizon)
    _require_history(values)

    sizes: list[float] = []
    intervals: list[int] = []
    since_last = 0
    seen_demand = False
    for x in values:
        since_last += 1
        if x > 0:
            sizes.append(float(x))
            if seen_demand:
                intervals.append(since_last)
            since_last = 0
            seen_demand = True

    if len(sizes) < 2 or not intervals:
        mean = sum(values) / float(len(values))
        return [max(mean, 0.0)] * horizon

    size = sizes[0]
    for s in sizes[1:]:
        size = alpha * s + (1.0 - alpha) * size

    interval = float(intervals[0])
    for i in intervals[1:]:
        interval = alpha * i + (1.0 - alpha) * interval

    if interval <= 0:
        interval = 1.0

    return [max(size / interval, 0.0)] * horizon


def validate_choice(choice: MethodChoice) -> None:
    """Reject out-of-range parameters without running the method."""

    if choice.method == ForecastMethod.SMA:
        if choice.window_size is None or choice.window_size < 2:
            raise InvalidParameterError(
                f"window_size must be >= 2, got {choice.window_size}"
            )
    elif choice.method == ForecastMethod.HOLTS:
        _require_smoothing("alpha", choice.alpha)
        _require_smoothing("beta", choice.beta)
    else:
        _require_smoothing("alpha", choice.alpha)


def run_method(choice: MethodChoice, values: Sequence[float], horizon: int) -> List[float]:
    if choice.method == ForecastMethod.SMA:
        return sma(values, choice.window_size, horizon)
    if choice.method == ForecastMethod.SES:
        return ses(values, choice.alpha, horizon)
    if choice.method == ForecastMethod.HOLTS:
        return holts(values, choice.alpha, choice.beta, horizon)
    if choice.method == ForecastMethod.CROSTON:
        return croston(values, choice.alpha, horizon)
    raise InvalidParameterError(f"Unsupported forecast method: {choice.method}")
