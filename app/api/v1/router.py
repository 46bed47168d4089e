from fastapi import APIRouter

from app.api.v1.endpoints import (
    demand_forecast,
    reorder_suggestion,
    scenario_simulation,
)

api_router = APIRouter()

api_router.include_router(demand_forecast.router, prefix="/analytics", tags=["demand-forecast"])
api_router.include_router(scenario_simulation.router, prefix="/analytics", tags=["scenario-simulation"])
api_router.include_router(reorder_suggestion.router, prefix="/reorder-suggestions", tags=["reorder-suggestions"])
