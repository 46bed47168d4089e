"""Seasonal swing detection and ratio-to-moving-average seasonal indices."""

from __future__ import annotations

from statistics import pstdev
from typing import Dict, List, Optional, Sequence

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import DemandPoint


def parse_month(month: str) -> tuple[int, int]:
    year, mon = month.split("-")
    return int(year), int(mon)


def shift_month(month: str, offset: int) -> str:
    """Return the ``YYYY-MM`` key ``offset`` months after ``month``."""

    year, mon = parse_month(month)
    total = year * 12 + (mon - 1) + offset
    return f"{total // 12:04d}-{total % 12 + 1:02d}"


def month_of_year(month: str) -> int:
    return parse_month(month)[1]


def seasonal_swing(values: Sequence[float]) -> Optional[float]:
    """Spread of month-over-month deltas relative to the mean level."""

    if len(values) < 3:
        return None
    mean = sum(values) / float(len(values))
    if mean <= 0:
        return None
    deltas = [float(b) - float(a) for a, b in zip(values, values[1:])]
    return pstdev(deltas) / mean


def _centred_moving_average(values: Sequence[float]) -> List[Optional[float]]:
    # 2x12 CMA: half weight on both ends of a 13-month span.
    n = len(values)
    cma: List[Optional[float]] = [None] * n
    for i in range(6, n - 6):
        total = sum(values[i - 5 : i + 6]) + 0.5 * values[i - 6] + 0.5 * values[i + 6]
        cma[i] = total / 12.0
    return cma


def _normalise(raw: Dict[int, float]) -> Optional[Dict[int, float]]:
    total = sum(raw.values())
    if total <= 0:
        return None
    return {m: v / total * 12.0 for m, v in raw.items()}


def _simple_ratio_indices(series: Sequence[DemandPoint]) -> Optional[Dict[int, float]]:
    values = [p.quantity for p in series]
    avg = sum(values) / float(len(values))
    if avg == 0:
        return None

    sums: Dict[int, float] = {m: 0.0 for m in range(1, 13)}
    counts: Dict[int, int] = {m: 0 for m in range(1, 13)}
    for p in series:
        m = month_of_year(p.month)
        sums[m] += p.quantity
        counts[m] += 1

    raw = {
        m: (sums[m] / counts[m] / avg) if counts[m] else 1.0
        for m in range(1, 13)
    }
    return _normalise(raw)


def seasonal_indices(series: Sequence[DemandPoint]) -> Optional[Dict[int, float]]:
    """Return a seasonal index per calendar month (1..12), summing to 12.

    Uses the ratio of each point to its 2x12 centred moving average; falls
    back to month-mean / overall-mean when some calendar month has no ratio
    (typically 12..23 months of history).
    """

    if len(series) < 12:
        return None

    values = [float(p.quantity) for p in series]
    cma = _centred_moving_average(values)

    ratios: Dict[int, List[float]] = {}
    for p, avg in zip(series, cma):
        if avg is None or avg == 0:
            continue
        ratios.setdefault(month_of_year(p.month), []).append(p.quantity / avg)

    if len(ratios) < 12:
        return _simple_ratio_indices(series)

    raw = {m: sum(r) / len(r) for m, r in ratios.items()}
    return _normalise(raw)


def detect_seasonality(
    series: Sequence[DemandPoint],
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> Optional[Dict[int, float]]:
    """Return usable seasonal indices when the series shows a seasonal swing."""

    if len(series) < settings.seasonal_min_months:
        return None

    swing = seasonal_swing([p.quantity for p in series])
    if swing is None or swing <= settings.seasonal_swing_threshold:
        return None

    indices = seasonal_indices(series)
    if indices is None or any(v <= 0 for v in indices.values()):
        return None
    return indices


def deseasonalise(series: Sequence[DemandPoint], indices: Dict[int, float]) -> List[float]:
    return [p.quantity / indices[month_of_year(p.month)] for p in series]


def reseasonalise(
    forecast: Sequence[float],
    last_month: str,
    indices: Dict[int, float],
) -> List[float]:
    return [
        max(value * indices[month_of_year(shift_month(last_month, h))], 0.0)
        for h, value in enumerate(forecast, start=1)
    ]
