from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from app.core.config import AnalyticsSettings, load_analytics_settings
from app.core.replenishment.domain import PolicyResult, StockStatus
from app.core.replenishment.policy import baseline_policy
from app.models.models import Product, ReorderSuggestion
from app.schemas.reorder_suggestion import ReorderScanResponse, ReorderSuggestionRead
from app.services.scenario_simulation import build_policy_inputs


logger = logging.getLogger(__name__)


def _explanation(product: Product, policy: PolicyResult, current_stock: int) -> str:
    return (
        f"{product.name} ({product.sku}): stock={current_stock}, "
        f"daily_demand={policy.adjusted_demand:.1f}, lead_time={policy.adjusted_lead_time}d, "
        f"safety_stock={policy.new_safety_stock}, reorder_point={policy.new_reorder_point}, "
        f"status={policy.stock_status.value}, suggested_qty={policy.required_order_quantity}."
    )


def scan_reorder_needs(
    db: Session,
    as_of: date | None = None,
    settings: AnalyticsSettings | None = None,
) -> ReorderScanResponse:
    """Persist a ReorderSuggestion for every selling product below policy.

    One row is kept per product and scan date: rescanning the same day
    refreshes that row instead of adding another.

    Products without sales in the demand window are skipped; products whose
    baseline stock status is sufficient produce no suggestion.
    """

    settings = settings or load_analytics_settings()
    as_of = as_of or date.today()

    products = db.query(Product).order_by(Product.id).all()
    scanned = 0
    suggestions: list[ReorderSuggestion] = []
    updated = 0

    existing = {
        s.product_id: s
        for s in db.query(ReorderSuggestion).filter(ReorderSuggestion.scan_date == as_of).all()
    }

    for product in products:
        inputs = build_policy_inputs(db, product, as_of, settings)
        if inputs.daily_demand <= 0:
            continue
        scanned += 1

        policy = baseline_policy(inputs, settings)
        suggestion = existing.get(product.id)
        if policy.stock_status == StockStatus.SUFFICIENT:
            if suggestion is not None:
                # Restocked since the earlier scan of this day.
                db.delete(suggestion)
            continue

        if suggestion is None:
            suggestion = ReorderSuggestion(product_id=product.id, scan_date=as_of)
            db.add(suggestion)
        else:
            updated += 1

        suggestion.created_at = datetime.now(timezone.utc)
        suggestion.stock_status = policy.stock_status.value
        suggestion.current_stock = inputs.current_stock
        suggestion.daily_demand = policy.adjusted_demand
        suggestion.safety_stock = policy.new_safety_stock
        suggestion.reorder_point = policy.new_reorder_point
        suggestion.suggested_quantity = policy.required_order_quantity
        suggestion.explanation = _explanation(product, policy, inputs.current_stock)
        suggestions.append(suggestion)

    db.commit()
    for suggestion in suggestions:
        db.refresh(suggestion)

    logger.warning(
        "Reorder scan finished: %s products scanned, %s suggestions (%s refreshed in place)",
        scanned,
        len(suggestions),
        updated,
    )
    return ReorderScanResponse(
        products_scanned=scanned,
        suggestions=[ReorderSuggestionRead.model_validate(s) for s in suggestions],
    )


def list_reorder_suggestions(
    db: Session,
    status_filter: StockStatus | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ReorderSuggestion]:
    query = db.query(ReorderSuggestion)
    if status_filter is not None:
        query = query.filter(ReorderSuggestion.stock_status == status_filter.value)
    return (
        query.order_by(ReorderSuggestion.created_at.desc(), ReorderSuggestion.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
