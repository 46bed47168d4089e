from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ReplenishmentError(Exception):
    """Base class for recoverable replenishment analytics errors."""


class InsufficientDataError(ReplenishmentError):
    """Raised when a demand series is too short to forecast."""


class InvalidParameterError(ReplenishmentError):
    """Raised when caller-supplied parameters are out of range."""


class ProductNotFoundError(ReplenishmentError):
    """Raised when the requested product does not exist."""


class ForecastMethod(str, Enum):
    SMA = "SMA"
    SES = "SES"
    HOLTS = "Holts"
    CROSTON = "Croston"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StockStatus(str, Enum):
    SUFFICIENT = "sufficient"
    NEED_ORDER = "need_order"
    URGENT = "urgent"


@dataclass(frozen=True)
class DemandPoint:
    """Units sold in one calendar month."""

    month: str
    """Month key in ``YYYY-MM`` form."""

    quantity: int


@dataclass(frozen=True)
class ProductDemandProfile:
    """Read-only snapshot of the product attributes the analytics core needs.

    Built per request from the product row and its classification signals;
    never mutated by the core.
    """

    id: int
    sku: str
    name: str
    abc_grade: Optional[str] = None
    xyz_grade: Optional[str] = None
    turnover_rate: Optional[float] = None
    """Annualized sales / current stock."""

    yoy_growth_rate: Optional[float] = None
    """Year-over-year growth in percent."""

    is_overstock: bool = False
    lead_time_days: int = 7
    lead_time_stddev_days: Optional[float] = None
    current_safety_stock: int = 0
    current_reorder_point: int = 0


@dataclass(frozen=True)
class MethodChoice:
    """Tagged forecast method variant with the parameters it runs with."""

    method: ForecastMethod
    window_size: Optional[int] = None
    alpha: Optional[float] = None
    beta: Optional[float] = None

    def parameters(self) -> dict:
        params = {}
        if self.window_size is not None:
            params["window_size"] = self.window_size
        if self.alpha is not None:
            params["alpha"] = self.alpha
        if self.beta is not None:
            params["beta"] = self.beta
        return params

    def describe(self) -> str:
        params = self.parameters()
        if not params:
            return self.method.value
        rendered = ", ".join(
            f"{key}={value:.2f}" if isinstance(value, float) else f"{key}={value}"
            for key, value in params.items()
        )
        return f"{self.method.value}({rendered})"


@dataclass(frozen=True)
class MethodSelection:
    choice: MethodChoice
    reason: str


@dataclass(frozen=True)
class BacktestResult:
    mape: Optional[float]
    confidence: Confidence
    points_evaluated: int


@dataclass
class ForecastResult:
    method: ForecastMethod
    parameters: dict
    is_manual: bool
    seasonally_adjusted: bool
    confidence: Confidence
    mape: Optional[float]
    selection_reason: str
    history: List[DemandPoint]
    predicted: List[DemandPoint]


@dataclass(frozen=True)
class PolicyInputs:
    """Everything the policy calculator needs for one product."""

    current_stock: int
    daily_demand: float
    """Average units sold per day."""

    lead_time_days: int
    current_safety_stock: int
    lead_time_stddev_days: Optional[float] = None


@dataclass
class PolicyResult:
    """Safety stock / reorder point outcome of one scenario (or the baseline)."""

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


@dataclass
class PortfolioSimulation:
    product_id: int
    product_name: str
    baseline: PolicyResult
    scenarios: List[PolicyResult] = field(default_factory=list)
