from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.replenishment.domain import InvalidParameterError
from app.schemas.demand_forecast import DemandForecastRequest, DemandForecastResponse
from app.services.demand_forecast import compute_forecast


router = APIRouter()


@router.get("/demand-forecast", response_model=DemandForecastResponse)
def get_demand_forecast(
    product_id: int | None = None,
    db: Session = Depends(get_db),
) -> DemandForecastResponse:
    """Automatically selected forecast for a product (or the top seller)."""

    return compute_forecast(db=db, product_id=product_id)


@router.post("/demand-forecast", response_model=DemandForecastResponse)
def post_demand_forecast(
    payload: DemandForecastRequest,
    db: Session = Depends(get_db),
) -> DemandForecastResponse:
    """Forecast with an optional manual method override."""

    try:
        return compute_forecast(db=db, product_id=payload.product_id, options=payload)
    except InvalidParameterError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
