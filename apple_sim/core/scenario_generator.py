"""Factory helpers for default farm types and scenarios."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models.scenario import FarmType, Scenario, ScenarioSet

DEFAULT_FARM_TYPES: List[Dict[str, Any]] = [
    {"id": 1, "name": "Full price", "share_percent": 60, "min_discount": 0, "max_discount": 0},
    {"id": 2, "name": "Small discount", "share_percent": 25, "min_discount": 5, "max_discount": 10},
    {"id": 3, "name": "Medium discount", "share_percent": 10, "min_discount": 15, "max_discount": 25},
    {"id": 4, "name": "Big discount", "share_percent": 5, "min_discount": 30, "max_discount": 40},
]

DEFAULT_SCENARIO: Dict[str, Any] = {
    "name": "Base Case",
    "last_year_cost": 1_000_000,
    "last_year_farms": 30,
    "min_new_farms": 8,
    "max_new_farms": 15,
    "trials": 10_000,
}


def default_farm_types() -> List[FarmType]:
    """Fresh copies of the four standard farm types."""
    return [FarmType(**spec) for spec in DEFAULT_FARM_TYPES]


def build_base_case(scenario_id: int = 1, **overrides: Any) -> Scenario:
    """Base case scenario; keyword overrides replace individual fields."""
    payload: Dict[str, Any] = {**DEFAULT_SCENARIO, "id": scenario_id}
    payload.setdefault("farm_types", default_farm_types())
    payload.update(overrides)
    return Scenario(**payload)


def build_scenario(payload: Dict[str, Any], scenario_id: Optional[int] = None) -> Scenario:
    """Build a scenario from a partial mapping, filling gaps from the base case."""
    data = dict(payload)
    if scenario_id is not None:
        data.setdefault("id", scenario_id)
    data.setdefault("id", 1)
    merged: Dict[str, Any] = {**DEFAULT_SCENARIO, **data}
    if "farm_types" not in data:
        merged["farm_types"] = default_farm_types()
    return Scenario(**merged)


def assemble_default_set() -> ScenarioSet:
    """Scenario set holding only the base case."""
    scenario_set = ScenarioSet()
    scenario_set.add(build_base_case())
    return scenario_set


__all__ = [
    "DEFAULT_FARM_TYPES",
    "DEFAULT_SCENARIO",
    "assemble_default_set",
    "build_base_case",
    "build_scenario",
    "default_farm_types",
]
