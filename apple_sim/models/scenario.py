"""Scenario data models."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .pricing import FarmTypePricing, PriceModel
from .results import SimulationResult


class FarmType(BaseModel):
    """A purchasing category with a market-share weight and a discount range."""

    id: int = Field(..., description="Stable identifier within a scenario")
    name: str = Field(default="New type", description="Display label")
    share_percent: float = Field(
        default=0.0, description="Relative market-share weight (normalised across types)"
    )
    min_discount: float = Field(default=0.0, description="Smallest discount in percent")
    max_discount: float = Field(default=0.0, description="Largest discount in percent")

    def multiplier_range(self) -> Tuple[float, float]:
        """Return ``(low, high)`` price multipliers for this type."""
        return 1.0 - self.max_discount / 100.0, 1.0 - self.min_discount / 100.0


class Scenario(BaseModel):
    """One named simulation configuration."""

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(..., description="Unique scenario identifier")
    name: str = Field(default="Base Case", description="Display name")
    last_year_cost: float = Field(..., description="Total spend across all farms last year")
    last_year_farms: int = Field(..., description="Number of farms used last year")
    min_new_farms: int = Field(..., description="Inclusive lower bound on this year's farm count")
    max_new_farms: int = Field(..., description="Inclusive upper bound on this year's farm count")
    trials: int = Field(..., description="Number of Monte Carlo trials")
    farm_types: List[FarmType] = Field(default_factory=list)
    price_model: PriceModel = Field(default_factory=FarmTypePricing)
    seed: Optional[int] = Field(
        default=None, description="RNG seed; the configured default is used when unset"
    )
    results: Optional[SimulationResult] = Field(
        default=None, description="Output of the latest completed run"
    )

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    def average_price_last_year(self) -> float:
        """Average spend per farm last year."""
        return self.last_year_cost / self.last_year_farms

    def farm_type(self, type_id: int) -> FarmType:
        for farm_type in self.farm_types:
            if farm_type.id == type_id:
                return farm_type
        raise KeyError(f"Farm type {type_id!r} not found in scenario {self.id!r}")


class ScenarioSet(BaseModel):
    """Ordered collection of scenarios plus the editing operations callers need."""

    scenarios: List[Scenario] = Field(default_factory=list)

    def add(self, scenario: Scenario) -> None:
        """Register a new scenario."""
        if any(s.id == scenario.id for s in self.scenarios):
            raise ValueError(f"Scenario {scenario.id!r} already exists")
        self.scenarios.append(scenario)

    def get(self, scenario_id: int) -> Scenario:
        """Fetch a scenario by identifier."""
        for scenario in self.scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise KeyError(f"Scenario {scenario_id!r} not found")

    def next_id(self) -> int:
        return max((s.id for s in self.scenarios), default=0) + 1

    def duplicate(self, scenario_id: int) -> Scenario:
        """Copy a scenario under a new id; results are not carried over."""
        source = self.get(scenario_id)
        copy = source.model_copy(
            update={
                "id": self.next_id(),
                "name": f"{source.name} (copy)",
                "results": None,
                "farm_types": [ft.model_copy() for ft in source.farm_types],
                "price_model": source.price_model.model_copy(deep=True),
            }
        )
        self.scenarios.append(copy)
        return copy

    def remove(self, scenario_id: int) -> None:
        """Delete a scenario; at least one scenario must remain."""
        scenario = self.get(scenario_id)
        if len(self.scenarios) <= 1:
            raise ValueError("Must have at least one scenario")
        self.scenarios.remove(scenario)

    def update(self, scenario_id: int, **fields: Any) -> Scenario:
        """Edit scenario fields. Stale results are cleared."""
        scenario = self.get(scenario_id)
        for key, value in fields.items():
            if key in {"id", "results"}:
                raise ValueError(f"Field {key!r} cannot be edited directly")
            if key not in Scenario.model_fields:
                raise KeyError(f"Unknown scenario field {key!r}")
            setattr(scenario, key, value)
        scenario.results = None
        return scenario

    def add_farm_type(self, scenario_id: int, name: str = "New type") -> FarmType:
        scenario = self.get(scenario_id)
        new_id = max((ft.id for ft in scenario.farm_types), default=0) + 1
        farm_type = FarmType(id=new_id, name=name)
        scenario.farm_types = [*scenario.farm_types, farm_type]
        scenario.results = None
        return farm_type

    def remove_farm_type(self, scenario_id: int, type_id: int) -> None:
        scenario = self.get(scenario_id)
        scenario.farm_type(type_id)
        if len(scenario.farm_types) <= 1:
            raise ValueError("Must have at least one farm type")
        scenario.farm_types = [ft for ft in scenario.farm_types if ft.id != type_id]
        scenario.results = None

    def update_farm_type(self, scenario_id: int, type_id: int, **fields: Any) -> FarmType:
        scenario = self.get(scenario_id)
        current = scenario.farm_type(type_id)
        if "id" in fields:
            raise ValueError("Farm type ids cannot be edited")
        unknown = set(fields) - set(FarmType.model_fields)
        if unknown:
            raise KeyError(f"Unknown farm type field(s): {', '.join(sorted(unknown))}")
        updated = FarmType(**{**current.model_dump(), **fields})
        scenario.farm_types = [
            updated if ft.id == type_id else ft for ft in scenario.farm_types
        ]
        scenario.results = None
        return updated

    def summary_frame(self) -> pd.DataFrame:
        """Return the comparison table; scenarios without results show NaN."""
        columns = ["scenario_id", "name", "median", "p10", "p90", "prob_positive"]
        rows = []
        for scenario in self.scenarios:
            row = {"scenario_id": scenario.id, "name": scenario.name}
            if scenario.results is not None:
                row.update(scenario.results.comparison_row())
            else:
                row.update({key: float("nan") for key in columns[2:]})
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)


__all__ = ["FarmType", "Scenario", "ScenarioSet"]
