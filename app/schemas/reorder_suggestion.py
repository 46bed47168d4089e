from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from app.core.replenishment.domain import StockStatus


class ReorderSuggestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    scan_date: date
    created_at: datetime

    stock_status: StockStatus
    current_stock: int
    daily_demand: float
    safety_stock: int
    reorder_point: int
    suggested_quantity: int

    explanation: str | None = None


class ReorderScanResponse(BaseModel):
    products_scanned: int
    suggestions: list[ReorderSuggestionRead]
