"""Automatic forecast method selection.

The policy is an ordered list of rules over the product's classification
signals; the first matching rule wins:

1. fewer than two months of history -> no method (InsufficientDataError)
2. strong YoY change -> Holt's (trend-aware)
3. XYZ grade: X -> SMA(3), Y -> SES(0.3), Z -> SES(0.5)
4. no XYZ grade -> SES(0.3) with 6+ months, otherwise SMA over up to 3 months
"""

from __future__ import annotations

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import (
    ForecastMethod,
    InsufficientDataError,
    MethodChoice,
    MethodSelection,
    ProductDemandProfile,
)
from app.core.replenishment.methods import MIN_POINTS


HOLTS_TREND = MethodChoice(ForecastMethod.HOLTS, alpha=0.3, beta=0.1)

XYZ_CHOICES: dict[str, MethodChoice] = {
    "X": MethodChoice(ForecastMethod.SMA, window_size=3),
    "Y": MethodChoice(ForecastMethod.SES, alpha=0.3),
    "Z": MethodChoice(ForecastMethod.SES, alpha=0.5),
}

XYZ_REASONS: dict[str, str] = {
    "X": "stable demand (XYZ grade X), moving average selected",
    "Y": "moderately variable demand (XYZ grade Y), exponential smoothing selected",
    "Z": "erratic demand (XYZ grade Z), fast-reacting exponential smoothing selected",
}

LONG_HISTORY_MONTHS = 6

# Annual turns.
HIGH_TURNOVER = 12.0
LOW_TURNOVER = 3.0


def _context_factors(profile: ProductDemandProfile, history_length: int) -> list[str]:
    factors: list[str] = []
    if profile.abc_grade:
        factors.append(f"ABC {profile.abc_grade}")
    if profile.xyz_grade:
        factors.append(f"XYZ {profile.xyz_grade}")
    factors.append(f"{history_length} months of data")
    if profile.turnover_rate is not None:
        if profile.turnover_rate > HIGH_TURNOVER:
            factors.append(f"high turnover ({profile.turnover_rate:.1f}x)")
        elif profile.turnover_rate < LOW_TURNOVER:
            factors.append(f"low turnover ({profile.turnover_rate:.1f}x)")
        else:
            factors.append(f"turnover {profile.turnover_rate:.1f}x")
    if profile.yoy_growth_rate is not None:
        factors.append(f"YoY {profile.yoy_growth_rate:+.0f}%")
    if profile.is_overstock:
        factors.append("overstock")
    return factors


def select_method(
    profile: ProductDemandProfile,
    history_length: int,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> MethodSelection:
    if history_length < MIN_POINTS:
        raise InsufficientDataError(
            f"At least {MIN_POINTS} months of history are required, got {history_length}"
        )

    xyz = (profile.xyz_grade or "").upper() or None

    if (
        profile.yoy_growth_rate is not None
        and abs(profile.yoy_growth_rate) >= settings.yoy_trend_threshold_percent
    ):
        choice = HOLTS_TREND
        rule = "trend-aware method selected due to significant YoY change"
    elif xyz in XYZ_CHOICES:
        choice = XYZ_CHOICES[xyz]
        rule = XYZ_REASONS[xyz]
    elif history_length >= LONG_HISTORY_MONTHS:
        choice = MethodChoice(ForecastMethod.SES, alpha=0.3)
        rule = f"no XYZ grade, {LONG_HISTORY_MONTHS}+ months of history, exponential smoothing selected"
    else:
        choice = MethodChoice(ForecastMethod.SMA, window_size=min(3, history_length))
        rule = "no XYZ grade and short history, moving average selected"

    factors = " · ".join(_context_factors(profile, history_length))
    return MethodSelection(choice=choice, reason=f"{rule} [{factors}] -> {choice.describe()}")
