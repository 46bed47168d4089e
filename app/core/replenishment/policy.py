"""Safety stock and reorder point calculator.

Demand variability is not re-estimated from raw sales here: it is
reverse-derived from the last approved safety stock, so every recomputed
policy stays consistent with that approval. ``derive_demand_stddev`` and
``safety_stock`` are exact inverses of each other.

    SS  = ceil(z * sqrt(LT * sigma^2 + d^2 * sigmaLT^2))
    ROP = ceil(d * LT + SS)

With no lead-time variability (sigmaLT = 0) SS reduces to
``ceil(z * sigma * sqrt(LT))``. The lead-time term is only used when the
approved safety stock covers it (SS >= z * d * sigmaLT); below that the
approval cannot have included lead-time variability and the plain formula
applies.
"""

from __future__ import annotations

import math
from typing import Optional

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import PolicyInputs, PolicyResult, StockStatus
from app.core.replenishment.rounding import ceil_quantity, round_half_up, round_int


SERVICE_LEVEL_Z = 1.65
"""One-sided z-score for a ~95% cycle service level."""

URGENT_SAFETY_STOCK_SHARE = 0.5

BASELINE_SCENARIO = "baseline"


def effective_lead_time(lead_time_days: int) -> int:
    return max(1, int(lead_time_days))


def derive_demand_stddev(
    safety_stock: float,
    lead_time_days: int,
    lead_time_stddev: Optional[float] = None,
    daily_demand: float = 0.0,
) -> float:
    lead_time = effective_lead_time(lead_time_days)
    lt_std = lead_time_stddev or 0.0
    demand_variance_term = (safety_stock / SERVICE_LEVEL_Z) ** 2 - (daily_demand * lt_std) ** 2
    return math.sqrt(max(demand_variance_term, 0.0) / lead_time)


def safety_stock(
    demand_stddev: float,
    lead_time_days: int,
    lead_time_stddev: Optional[float] = None,
    daily_demand: float = 0.0,
) -> int:
    lead_time = effective_lead_time(lead_time_days)
    lt_std = lead_time_stddev or 0.0
    variance = lead_time * demand_stddev ** 2 + (daily_demand * lt_std) ** 2
    return ceil_quantity(SERVICE_LEVEL_Z * math.sqrt(variance))


def reorder_point(daily_demand: float, lead_time_days: int, safety_stock_qty: int) -> int:
    return ceil_quantity(daily_demand * effective_lead_time(lead_time_days) + safety_stock_qty)


def stock_status(current_stock: int, safety_stock_qty: int, reorder_point_qty: int) -> StockStatus:
    if current_stock < safety_stock_qty * URGENT_SAFETY_STOCK_SHARE:
        return StockStatus.URGENT
    if current_stock <= reorder_point_qty:
        return StockStatus.NEED_ORDER
    return StockStatus.SUFFICIENT


def required_order_quantity(
    status: StockStatus,
    current_stock: int,
    reorder_point_qty: int,
    daily_demand: float,
    forward_cover_days: int = DEFAULT_SETTINGS.forward_cover_days,
) -> int:
    """Quantity that lifts stock to the reorder point plus forward cover."""

    if status == StockStatus.SUFFICIENT:
        return 0
    return ceil_quantity(reorder_point_qty + daily_demand * forward_cover_days - current_stock)


def safety_stock_ratio(current_stock: int, safety_stock_qty: int) -> int:
    if safety_stock_qty <= 0:
        return 0
    return round_int(current_stock / safety_stock_qty * 100.0)


def applicable_lead_time_stddev(inputs: PolicyInputs) -> Optional[float]:
    lt_std = inputs.lead_time_stddev_days or 0.0
    if lt_std <= 0:
        return None
    if inputs.current_safety_stock < SERVICE_LEVEL_Z * inputs.daily_demand * lt_std:
        return None
    return lt_std


def evaluate_policy(
    inputs: PolicyInputs,
    scenario_name: str,
    demand_change_percent: float,
    lead_time_change_days: int,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> PolicyResult:
    """Recompute the policy under a demand / lead-time perturbation.

    Demand variability scales with demand volume.
    """

    factor = 1.0 + demand_change_percent / 100.0
    base_lead_time = effective_lead_time(inputs.lead_time_days)
    lt_std = applicable_lead_time_stddev(inputs)
    sigma = derive_demand_stddev(
        inputs.current_safety_stock,
        base_lead_time,
        lt_std,
        inputs.daily_demand,
    )

    adjusted_demand = max(inputs.daily_demand * factor, 0.0)
    adjusted_lead_time = effective_lead_time(base_lead_time + lead_time_change_days)
    adjusted_sigma = max(sigma * factor, 0.0)

    new_ss = safety_stock(
        adjusted_sigma,
        adjusted_lead_time,
        lt_std,
        adjusted_demand,
    )
    new_rop = reorder_point(adjusted_demand, adjusted_lead_time, new_ss)
    status = stock_status(inputs.current_stock, new_ss, new_rop)

    return PolicyResult(
        scenario_name=scenario_name,
        demand_change_percent=float(demand_change_percent),
        lead_time_change_days=int(lead_time_change_days),
        adjusted_demand=round_half_up(adjusted_demand, 1),
        adjusted_lead_time=adjusted_lead_time,
        new_safety_stock=new_ss,
        new_reorder_point=new_rop,
        stock_status=status,
        required_order_quantity=required_order_quantity(
            status,
            inputs.current_stock,
            new_rop,
            adjusted_demand,
            settings.forward_cover_days,
        ),
        safety_stock_ratio=safety_stock_ratio(inputs.current_stock, new_ss),
    )


def baseline_policy(
    inputs: PolicyInputs,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> PolicyResult:
    return evaluate_policy(inputs, BASELINE_SCENARIO, 0.0, 0, settings)
