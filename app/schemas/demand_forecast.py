from __future__ import annotations

from pydantic import BaseModel

from app.core.replenishment.domain import Confidence, ForecastMethod


class ForecastManualParams(BaseModel):
    window_size: int | None = None
    alpha: float | None = None
    beta: float | None = None


class DemandForecastRequest(BaseModel):
    product_id: int | None = None
    manual_method: ForecastMethod | None = None
    manual_params: ForecastManualParams | None = None


class ProductOption(BaseModel):
    id: int
    sku: str
    name: str
    abc_grade: str | None
    xyz_grade: str | None


class DemandPointSchema(BaseModel):
    month: str
    quantity: int


class ForecastMeta(BaseModel):
    abc_grade: str | None
    xyz_grade: str | None
    turnover_rate: float | None
    yoy_growth_rate: float | None
    is_overstock: bool
    data_months: int


class DemandForecast(BaseModel):
    product_id: int
    product_name: str

    method: ForecastMethod
    parameters: dict[str, int | float]
    is_manual: bool
    seasonally_adjusted: bool

    confidence: Confidence
    mape: float | None
    selection_reason: str

    meta: ForecastMeta
    history: list[DemandPointSchema]
    predicted: list[DemandPointSchema]


class DemandForecastResponse(BaseModel):
    products: list[ProductOption]
    forecast: DemandForecast | None = None
