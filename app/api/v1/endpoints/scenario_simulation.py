from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.replenishment.domain import InvalidParameterError, ProductNotFoundError
from app.schemas.scenario_simulation import (
    PortfolioSimulationResponse,
    ScenarioResult,
    ScenarioSimulationRequest,
)
from app.services.scenario_simulation import simulate_portfolio, simulate_scenarios


router = APIRouter()


@router.post("/scenario-simulation", response_model=list[ScenarioResult])
def run_scenario_simulation(
    payload: ScenarioSimulationRequest,
    db: Session = Depends(get_db),
) -> list[ScenarioResult]:
    try:
        return simulate_scenarios(
            db=db,
            product_id=payload.product_id,
            demand_change_percent=payload.demand_change_percent,
            lead_time_change_days=payload.lead_time_change_days,
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvalidParameterError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/scenario-simulation/portfolio", response_model=PortfolioSimulationResponse)
def get_portfolio_simulation(
    product_ids: list[int] | None = Query(None),
    db: Session = Depends(get_db),
) -> PortfolioSimulationResponse:
    return simulate_portfolio(db=db, product_ids=product_ids)
