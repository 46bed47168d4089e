from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import DemandPoint, ProductDemandProfile
from app.core.replenishment.rounding import round_half_up
from app.core.replenishment.seasonality import shift_month
from app.models.models import InventoryLevel, Product, SalesRecord


YOY_MIN_MONTHS = 6


def _month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def get_monthly_demand(
    db: Session,
    product_id: int,
    as_of: date,
    months: int = DEFAULT_SETTINGS.history_months,
) -> list[DemandPoint]:
    """Monthly units sold over the trailing ``months`` calendar months.

    The series runs from the first to the last month with sales; months
    without sales in between are reported as zero.
    """

    first_month = shift_month(_month_key(as_of), -(months - 1))
    start_date = date.fromisoformat(f"{first_month}-01")

    rows = (
        db.query(SalesRecord.date, func.coalesce(func.sum(SalesRecord.quantity), 0))
        .filter(
            SalesRecord.product_id == product_id,
            SalesRecord.date >= start_date,
            SalesRecord.date <= as_of,
        )
        .group_by(SalesRecord.date)
        .all()
    )
    if not rows:
        return []

    totals: dict[str, int] = defaultdict(int)
    for day, qty in rows:
        totals[_month_key(day)] += int(qty or 0)

    keys = sorted(totals)
    series: list[DemandPoint] = []
    month = keys[0]
    while month <= keys[-1]:
        series.append(DemandPoint(month=month, quantity=max(totals.get(month, 0), 0)))
        month = shift_month(month, 1)
    return series


def get_average_daily_demand(
    db: Session,
    product_id: int,
    as_of: date,
    window_days: int = DEFAULT_SETTINGS.demand_window_days,
) -> float:
    """Average units per selling day over the trailing window (1 decimal)."""

    start_date = as_of - timedelta(days=window_days - 1)
    total_sales, days_with_sales = (
        db.query(
            func.coalesce(func.sum(SalesRecord.quantity), 0),
            func.count(func.distinct(SalesRecord.date)),
        )
        .filter(
            SalesRecord.product_id == product_id,
            SalesRecord.date >= start_date,
            SalesRecord.date <= as_of,
        )
        .one()
    )

    total_sales = int(total_sales or 0)
    days_with_sales = int(days_with_sales or 0)
    if days_with_sales == 0 or total_sales <= 0:
        return 0.0
    return round_half_up(float(total_sales) / float(days_with_sales), 1)


def get_current_stock(db: Session, product_id: int) -> int:
    stock = (
        db.query(InventoryLevel.current_stock)
        .filter(InventoryLevel.product_id == product_id)
        .scalar()
    )
    return int(stock or 0)


def find_top_selling_product_id(db: Session) -> int | None:
    """Product with the most sales records, used when none is requested."""

    row = (
        db.query(SalesRecord.product_id, func.count(SalesRecord.id).label("records"))
        .group_by(SalesRecord.product_id)
        .order_by(func.count(SalesRecord.id).desc(), SalesRecord.product_id)
        .first()
    )
    return row[0] if row is not None else None


def _yoy_growth_rate(history: list[DemandPoint]) -> float | None:
    if len(history) < YOY_MIN_MONTHS:
        return None
    half = len(history) // 2
    first = [p.quantity for p in history[:half]]
    second = [p.quantity for p in history[half:]]
    first_avg = sum(first) / float(len(first))
    second_avg = sum(second) / float(len(second))
    if first_avg <= 0:
        return None
    return round_half_up((second_avg - first_avg) / first_avg * 100.0, 1)


def build_demand_profile(
    db: Session,
    product: Product,
    history: list[DemandPoint],
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> ProductDemandProfile:
    """Classification signals for ``product`` on top of its stored grades."""

    current_stock = get_current_stock(db, product.id)
    safety_stock = int(product.safety_stock or 0)

    turnover_rate = None
    if history and current_stock > 0:
        total = sum(p.quantity for p in history)
        annualised = total / float(len(history)) * 12.0
        turnover_rate = round_half_up(annualised / float(current_stock), 1)

    is_overstock = safety_stock > 0 and current_stock >= safety_stock * settings.overstock_multiplier

    return ProductDemandProfile(
        id=product.id,
        sku=product.sku,
        name=product.name,
        abc_grade=product.abc_grade,
        xyz_grade=product.xyz_grade,
        turnover_rate=turnover_rate,
        yoy_growth_rate=_yoy_growth_rate(history),
        is_overstock=is_overstock,
        lead_time_days=max(int(product.lead_time_days or 1), 1),
        lead_time_stddev_days=product.lead_time_stddev_days,
        current_safety_stock=safety_stock,
        current_reorder_point=int(product.reorder_point or 0),
    )
