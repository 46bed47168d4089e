from __future__ import annotations

import os
from dataclasses import dataclass


ENV_PREFIX = "REPLENISHMENT_"


@dataclass(frozen=True)
class AnalyticsSettings:
    """Tunable thresholds of the replenishment analytics core.

    The numeric defaults mirror the policy the dashboard has always used;
    they are configuration, not ground truth.
    """

    forecast_horizon_months: int = 3
    history_months: int = 12
    demand_window_days: int = 90

    yoy_trend_threshold_percent: float = 15.0
    """Absolute YoY growth at or above which the trend-aware method is used."""

    seasonal_min_months: int = 12
    seasonal_swing_threshold: float = 0.25
    """Stddev of month-over-month deltas relative to the series mean."""

    backtest_origins: int = 3
    confidence_high_mape: float = 15.0
    confidence_medium_mape: float = 30.0

    overstock_multiplier: float = 3.0
    overstock_forecast_factor: float = 0.9

    forward_cover_days: int = 30
    portfolio_limit: int = 20


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def load_analytics_settings() -> AnalyticsSettings:
    """Build settings from ``REPLENISHMENT_*`` environment variables."""

    d = AnalyticsSettings()
    return AnalyticsSettings(
        forecast_horizon_months=_env_int("FORECAST_HORIZON_MONTHS", d.forecast_horizon_months),
        history_months=_env_int("HISTORY_MONTHS", d.history_months),
        demand_window_days=_env_int("DEMAND_WINDOW_DAYS", d.demand_window_days),
        yoy_trend_threshold_percent=_env_float(
            "YOY_TREND_THRESHOLD_PERCENT", d.yoy_trend_threshold_percent
        ),
        seasonal_min_months=_env_int("SEASONAL_MIN_MONTHS", d.seasonal_min_months),
        seasonal_swing_threshold=_env_float("SEASONAL_SWING_THRESHOLD", d.seasonal_swing_threshold),
        backtest_origins=_env_int("BACKTEST_ORIGINS", d.backtest_origins),
        confidence_high_mape=_env_float("CONFIDENCE_HIGH_MAPE", d.confidence_high_mape),
        confidence_medium_mape=_env_float("CONFIDENCE_MEDIUM_MAPE", d.confidence_medium_mape),
        overstock_multiplier=_env_float("OVERSTOCK_MULTIPLIER", d.overstock_multiplier),
        overstock_forecast_factor=_env_float(
            "OVERSTOCK_FORECAST_FACTOR", d.overstock_forecast_factor
        ),
        forward_cover_days=_env_int("FORWARD_COVER_DAYS", d.forward_cover_days),
        portfolio_limit=_env_int("PORTFOLIO_LIMIT", d.portfolio_limit),
    )


DEFAULT_SETTINGS = AnalyticsSettings()
