from __future__ import annotations

from dataclasses import dataclass
from typing import List

from app.core.config import DEFAULT_SETTINGS, AnalyticsSettings
from app.core.replenishment.domain import InvalidParameterError, PolicyInputs, PolicyResult
from app.core.replenishment.policy import baseline_policy, evaluate_policy


DEMAND_CHANGE_RANGE = (-50.0, 50.0)
LEAD_TIME_CHANGE_RANGE = (-5, 10)

USER_SCENARIO = "user"


@dataclass(frozen=True)
class ScenarioDefinition:
    name: str
    demand_change_percent: float
    lead_time_change_days: int


PREDEFINED_SCENARIOS: List[ScenarioDefinition] = [
    ScenarioDefinition("demand +10%", 10.0, 0),
    ScenarioDefinition("demand +20%", 20.0, 0),
    ScenarioDefinition("demand +30%", 30.0, 0),
    ScenarioDefinition("demand -10%", -10.0, 0),
    ScenarioDefinition("demand -20%", -20.0, 0),
    ScenarioDefinition("lead time +3d", 0.0, 3),
    ScenarioDefinition("lead time +5d", 0.0, 5),
    ScenarioDefinition("lead time +10d", 0.0, 10),
    ScenarioDefinition("lead time -2d", 0.0, -2),
    ScenarioDefinition("worst case: demand +20% & lead time +5d", 20.0, 5),
    ScenarioDefinition("best case: demand -20% & lead time -2d", -20.0, -2),
]

# Display order is a contract with the dashboard, not a sort.
DISPLAY_SCENARIOS: List[str] = [
    "demand +20%",
    "demand -20%",
    "lead time +5d",
    "lead time -2d",
    "worst case: demand +20% & lead time +5d",
    "best case: demand -20% & lead time -2d",
]


def validate_perturbation(demand_change_percent: float, lead_time_change_days: int) -> None:
    low, high = DEMAND_CHANGE_RANGE
    if not low <= demand_change_percent <= high:
        raise InvalidParameterError(
            f"demand_change_percent must be within [{low:g}, {high:g}], got {demand_change_percent}"
        )
    low_lt, high_lt = LEAD_TIME_CHANGE_RANGE
    if not low_lt <= lead_time_change_days <= high_lt:
        raise InvalidParameterError(
            f"lead_time_change_days must be within [{low_lt}, {high_lt}], got {lead_time_change_days}"
        )


def simulate(
    inputs: PolicyInputs,
    name: str,
    demand_change_percent: float,
    lead_time_change_days: int,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> PolicyResult:
    validate_perturbation(demand_change_percent, lead_time_change_days)
    return evaluate_policy(inputs, name, demand_change_percent, lead_time_change_days, settings)


def _predefined(name: str) -> ScenarioDefinition:
    for definition in PREDEFINED_SCENARIOS:
        if definition.name == name:
            return definition
    raise KeyError(name)


def run_scenarios(
    inputs: PolicyInputs,
    demand_change_percent: float,
    lead_time_change_days: int,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> List[PolicyResult]:
    """Baseline, then the user scenario, then the curated predefined scenarios.

    Every scenario perturbs the baseline independently.
    """

    validate_perturbation(demand_change_percent, lead_time_change_days)

    results = [
        baseline_policy(inputs, settings),
        simulate(inputs, USER_SCENARIO, demand_change_percent, lead_time_change_days, settings),
    ]
    for name in DISPLAY_SCENARIOS:
        definition = _predefined(name)
        results.append(
            simulate(
                inputs,
                definition.name,
                definition.demand_change_percent,
                definition.lead_time_change_days,
                settings,
            )
        )
    return results


def run_catalog(
    inputs: PolicyInputs,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> tuple[PolicyResult, List[PolicyResult]]:
    """Baseline plus every predefined scenario, in catalog order."""

    baseline = baseline_policy(inputs, settings)
    scenarios = [
        simulate(
            inputs,
            d.name,
            d.demand_change_percent,
            d.lead_time_change_days,
            settings,
        )
        for d in PREDEFINED_SCENARIOS
    ]
    return baseline, scenarios
