from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from app.core.replenishment.domain import StockStatus


class ScenarioSimulationRequest(BaseModel):
    """Perturbation applied on top of the product's baseline policy.

    Range checks happen in the scenario core so direct callers and the API
    reject the same values.
    """

    product_id: int
    demand_change_percent: float = 0.0
    lead_time_change_days: int = 0


class ScenarioResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scenario_name: str
    demand_change_percent: float
    lead_time_change_days: int

    adjusted_demand: float
    adjusted_lead_time: int

    new_safety_stock: int
    new_reorder_point: int

    stock_status: StockStatus
    required_order_quantity: int
    safety_stock_ratio: int


class PortfolioSimulationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    product_name: str
    baseline: ScenarioResult
    scenarios: list[ScenarioResult]


class PortfolioSimulationResponse(BaseModel):
    items: list[PortfolioSimulationItem]
