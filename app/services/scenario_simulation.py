from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from app.core.config import AnalyticsSettings, load_analytics_settings
from app.core.replenishment.domain import (
    PolicyInputs,
    PortfolioSimulation,
    ProductNotFoundError,
    StockStatus,
)
from app.core.replenishment.policy import baseline_policy
from app.core.replenishment.scenarios import run_catalog, run_scenarios
from app.models.models import Product
from app.schemas.scenario_simulation import (
    PortfolioSimulationItem,
    PortfolioSimulationResponse,
    ScenarioResult,
)
from app.services.demand_history import get_average_daily_demand, get_current_stock


logger = logging.getLogger(__name__)


GRADE_PRIORITY = {"A": 0, "B": 1}
STATUS_PRIORITY = {StockStatus.URGENT: 0, StockStatus.NEED_ORDER: 1}


def build_policy_inputs(
    db: Session,
    product: Product,
    as_of: date,
    settings: AnalyticsSettings,
) -> PolicyInputs:
    return PolicyInputs(
        current_stock=get_current_stock(db, product.id),
        daily_demand=get_average_daily_demand(db, product.id, as_of, settings.demand_window_days),
        lead_time_days=max(int(product.lead_time_days or 1), 1),
        current_safety_stock=int(product.safety_stock or 0),
        lead_time_stddev_days=product.lead_time_stddev_days,
    )


def simulate_scenarios(
    db: Session,
    product_id: int,
    demand_change_percent: float = 0.0,
    lead_time_change_days: int = 0,
    as_of: date | None = None,
    settings: AnalyticsSettings | None = None,
) -> list[ScenarioResult]:
    """Baseline, user scenario and curated predefined scenarios for one product.

    Raises ProductNotFoundError for an unknown product and
    InvalidParameterError for perturbations outside the supported range.
    """

    settings = settings or load_analytics_settings()
    as_of = as_of or date.today()

    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")

    inputs = build_policy_inputs(db, product, as_of, settings)
    results = run_scenarios(inputs, demand_change_percent, lead_time_change_days, settings)

    logger.info(
        "Simulated %s scenarios for product_id=%s (demand %+g%%, lead time %+d d)",
        len(results),
        product_id,
        demand_change_percent,
        lead_time_change_days,
    )
    return [ScenarioResult.model_validate(r, from_attributes=True) for r in results]


def _portfolio_candidates(
    db: Session,
    product_ids: list[int] | None,
    as_of: date,
    settings: AnalyticsSettings,
) -> list[tuple[Product, PolicyInputs]]:
    query = db.query(Product)
    if product_ids:
        query = query.filter(Product.id.in_(product_ids))
    products = query.order_by(Product.id).all()

    candidates: list[tuple[Product, PolicyInputs]] = []
    for product in products:
        inputs = build_policy_inputs(db, product, as_of, settings)
        if inputs.daily_demand <= 0:
            # No sales in the demand window: nothing meaningful to simulate.
            continue
        candidates.append((product, inputs))

    if product_ids or len(candidates) <= settings.portfolio_limit:
        return candidates

    def _priority(item: tuple[Product, PolicyInputs]) -> tuple[int, int, int]:
        product, inputs = item
        status = baseline_policy(inputs, settings).stock_status
        return (
            GRADE_PRIORITY.get((product.abc_grade or "").upper(), 2),
            STATUS_PRIORITY.get(status, 2),
            product.id,
        )

    return sorted(candidates, key=_priority)[: settings.portfolio_limit]


def simulate_portfolio(
    db: Session,
    product_ids: list[int] | None = None,
    as_of: date | None = None,
    settings: AnalyticsSettings | None = None,
) -> PortfolioSimulationResponse:
    """Baseline plus the full predefined scenario catalog for many products.

    Without explicit ids the top products are chosen: ABC grade A/B first,
    then products whose baseline is urgent or needs an order.
    """

    settings = settings or load_analytics_settings()
    as_of = as_of or date.today()

    items: list[PortfolioSimulationItem] = []
    for product, inputs in _portfolio_candidates(db, product_ids, as_of, settings):
        baseline, scenarios = run_catalog(inputs, settings)
        simulation = PortfolioSimulation(
            product_id=product.id,
            product_name=f"{product.name} ({product.sku})",
            baseline=baseline,
            scenarios=scenarios,
        )
        items.append(PortfolioSimulationItem.model_validate(simulation, from_attributes=True))

    logger.info("Portfolio simulation produced %s items", len(items))
    return PortfolioSimulationResponse(items=items)
