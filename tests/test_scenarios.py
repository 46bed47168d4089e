from __future__ import annotations

import pytest

from app.core.replenishment.domain import InvalidParameterError, PolicyInputs, StockStatus
from app.core.replenishment.scenarios import (
    DISPLAY_SCENARIOS,
    PREDEFINED_SCENARIOS,
    run_catalog,
    run_scenarios,
    simulate,
)


BASE = PolicyInputs(current_stock=20, daily_demand=10.0, lead_time_days=10, current_safety_stock=50)


def test_scenarios_are_returned_in_display_order():
    results = run_scenarios(BASE, 10.0, 2)

    names = [r.scenario_name for r in results]
    assert names == ["baseline", "user"] + DISPLAY_SCENARIOS
    assert len(results) == 8


def test_user_scenario_without_changes_matches_baseline():
    baseline, user = run_scenarios(BASE, 0.0, 0)[:2]

    assert user.new_safety_stock == baseline.new_safety_stock
    assert user.new_reorder_point == baseline.new_reorder_point
    assert user.required_order_quantity == baseline.required_order_quantity


def test_predefined_scenarios_perturb_the_baseline_independently():
    results = {r.scenario_name: r for r in run_scenarios(BASE, 50.0, 10)}

    demand_up = results["demand +20%"]
    assert demand_up.new_safety_stock == 60
    assert demand_up.new_reorder_point == 180
    assert demand_up.adjusted_lead_time == 10

    worst = results["worst case: demand +20% & lead time +5d"]
    assert worst.new_safety_stock == 74
    assert worst.new_reorder_point == 254
    assert worst.required_order_quantity == 594

    best = results["best case: demand -20% & lead time -2d"]
    assert best.adjusted_demand == 8.0
    assert best.adjusted_lead_time == 8
    # SS shrinks to 36, so 20 units is no longer below half of it.
    assert best.new_safety_stock == 36
    assert best.stock_status == StockStatus.NEED_ORDER


@pytest.mark.parametrize(
    "demand, lead_time",
    [(50.1, 0), (-51.0, 0), (0.0, 11), (0.0, -6)],
)
def test_out_of_range_perturbations_are_rejected(demand, lead_time):
    with pytest.raises(InvalidParameterError):
        run_scenarios(BASE, demand, lead_time)


@pytest.mark.parametrize("demand, lead_time", [(50.0, 10), (-50.0, -5)])
def test_range_bounds_are_inclusive(demand, lead_time):
    result = simulate(BASE, "edge", demand, lead_time)

    assert result.demand_change_percent == demand
    assert result.lead_time_change_days == lead_time


def test_catalog_covers_every_predefined_scenario():
    baseline, scenarios = run_catalog(BASE)

    assert baseline.scenario_name == "baseline"
    assert [s.scenario_name for s in scenarios] == [d.name for d in PREDEFINED_SCENARIOS]
    assert len(scenarios) == 11


def test_display_scenarios_exist_in_catalog():
    names = {d.name for d in PREDEFINED_SCENARIOS}

    assert set(DISPLAY_SCENARIOS) <= names


def test_scenarios_are_deterministic():
    first = run_scenarios(BASE, -12.5, 3)
    second = run_scenarios(BASE, -12.5, 3)

    assert first == second
