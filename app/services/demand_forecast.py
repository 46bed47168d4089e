from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from app.core.config import AnalyticsSettings, load_analytics_settings
from app.core.replenishment.domain import InsufficientDataError, MethodChoice
from app.core.replenishment.forecast import build_forecast
from app.models.models import Product
from app.schemas.demand_forecast import (
    DemandForecast,
    DemandForecastRequest,
    DemandForecastResponse,
    DemandPointSchema,
    ForecastMeta,
    ProductOption,
)
from app.services.demand_history import (
    build_demand_profile,
    find_top_selling_product_id,
    get_monthly_demand,
)


logger = logging.getLogger(__name__)


def _manual_choice(options: DemandForecastRequest | None) -> MethodChoice | None:
    if options is None or options.manual_method is None:
        return None
    params = options.manual_params
    return MethodChoice(
        method=options.manual_method,
        window_size=params.window_size if params else None,
        alpha=params.alpha if params else None,
        beta=params.beta if params else None,
    )


def list_product_options(db: Session) -> list[ProductOption]:
    products = db.query(Product).order_by(Product.id).all()
    return [
        ProductOption(
            id=p.id,
            sku=p.sku,
            name=p.name,
            abc_grade=p.abc_grade,
            xyz_grade=p.xyz_grade,
        )
        for p in products
    ]


def compute_forecast(
    db: Session,
    product_id: int | None = None,
    options: DemandForecastRequest | None = None,
    as_of: date | None = None,
    settings: AnalyticsSettings | None = None,
) -> DemandForecastResponse:
    """Forecast monthly demand for one product.

    Without ``product_id`` the product with the most sales records is used.
    ``forecast`` is None when the product is unknown or has fewer than two
    months of history. Out-of-range manual parameters raise
    InvalidParameterError.
    """

    settings = settings or load_analytics_settings()
    as_of = as_of or date.today()
    if product_id is None and options is not None:
        product_id = options.product_id

    products = list_product_options(db)
    if not products:
        return DemandForecastResponse(products=[], forecast=None)

    if product_id is None:
        product_id = find_top_selling_product_id(db)
        if product_id is None:
            logger.info("No sales records found; no product to forecast")
            return DemandForecastResponse(products=products, forecast=None)

    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        logger.warning("Demand forecast requested for unknown product_id=%s", product_id)
        return DemandForecastResponse(products=products, forecast=None)

    history = get_monthly_demand(db, product.id, as_of, settings.history_months)
    profile = build_demand_profile(db, product, history, settings)

    try:
        result = build_forecast(profile, history, settings, manual_choice=_manual_choice(options))
    except InsufficientDataError as exc:
        logger.info("Forecast skipped for product_id=%s: %s", product.id, exc)
        return DemandForecastResponse(products=products, forecast=None)

    if result.mape is None:
        logger.info(
            "No usable backtest for product_id=%s (%s months); confidence forced to low",
            product.id,
            len(history),
        )

    forecast = DemandForecast(
        product_id=product.id,
        product_name=product.name,
        method=result.method,
        parameters=result.parameters,
        is_manual=result.is_manual,
        seasonally_adjusted=result.seasonally_adjusted,
        confidence=result.confidence,
        mape=result.mape,
        selection_reason=result.selection_reason,
        meta=ForecastMeta(
            abc_grade=profile.abc_grade,
            xyz_grade=profile.xyz_grade,
            turnover_rate=profile.turnover_rate,
            yoy_growth_rate=profile.yoy_growth_rate,
            is_overstock=profile.is_overstock,
            data_months=len(history),
        ),
        history=[DemandPointSchema(month=p.month, quantity=p.quantity) for p in result.history],
        predicted=[DemandPointSchema(month=p.month, quantity=p.quantity) for p in result.predicted],
    )
    return DemandForecastResponse(products=products, forecast=forecast)
