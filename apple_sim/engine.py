"""High-level orchestration for the savings simulator."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

import pandas as pd

from .config import DEFAULT_SEED
from .core.monte_carlo import simulate_savings
from .core.rng import SeededRNG
from .core.sampler import build_sampler
from .core.scenario_generator import assemble_default_set
from .core.statistics import build_histogram, summarize_savings
from .core.validator import ValidationError, ValidationReport, validate_scenario
from .models.results import SimulationResult
from .models.scenario import Scenario, ScenarioSet

LOGGER = logging.getLogger(__name__)


def validate(scenario: Scenario) -> ValidationReport:
    """Validate a scenario; ``report.ok`` gates simulation."""
    return validate_scenario(scenario)


def simulate(
    scenario: Scenario,
    *,
    seed: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> SimulationResult:
    """
    Run the Monte Carlo simulation for a valid scenario.

    The seed resolves as: explicit ``seed`` argument, then ``scenario.seed``,
    then the configured default. Invalid scenarios raise
    :class:`ValidationError`; no partial result is ever returned.
    """
    validate_scenario(scenario).raise_for_errors(f"scenario {scenario.name!r}")

    resolved_seed = seed if seed is not None else scenario.seed
    if resolved_seed is None:
        resolved_seed = DEFAULT_SEED

    sampler = build_sampler(scenario.price_model, scenario.farm_types)
    rng = SeededRNG(resolved_seed)

    LOGGER.info(
        "Simulating scenario %r: %d trials, %s mode, seed %d",
        scenario.name,
        scenario.trials,
        sampler.mode,
        resolved_seed,
    )
    started = time.perf_counter()
    savings = simulate_savings(scenario, rng, sampler, progress_callback=progress_callback)
    stats = summarize_savings(savings)
    histogram = build_histogram(savings)
    elapsed = time.perf_counter() - started
    LOGGER.info(
        "Scenario %r finished in %.2fs (median savings %.0f)",
        scenario.name,
        elapsed,
        stats.median,
    )

    return SimulationResult(
        scenario_id=scenario.id,
        savings=savings,
        stats=stats,
        histogram=histogram,
        seed=resolved_seed,
        mode=sampler.mode,
        metadata={"elapsed_seconds": elapsed},
    )


class SavingsEngine:
    """Caller-side session: a scenario set, the active selection and run helpers."""

    def __init__(self, scenario_set: Optional[ScenarioSet] = None) -> None:
        self.scenario_set = scenario_set if scenario_set is not None else assemble_default_set()
        if not self.scenario_set.scenarios:
            raise ValueError("Scenario set must contain at least one scenario.")
        self.active_id = self.scenario_set.scenarios[0].id

    # ---------------------------------------------------------------- Selection
    def active_scenario(self) -> Scenario:
        return self.scenario_set.get(self.active_id)

    def select(self, scenario_id: int) -> Scenario:
        scenario = self.scenario_set.get(scenario_id)
        self.active_id = scenario_id
        return scenario

    def duplicate_active(self) -> Scenario:
        """Copy the active scenario and make the copy active."""
        copy = self.scenario_set.duplicate(self.active_id)
        self.active_id = copy.id
        return copy

    def remove(self, scenario_id: int) -> None:
        """Delete a scenario, moving the selection if the active one goes."""
        self.scenario_set.remove(scenario_id)
        if self.active_id == scenario_id:
            self.active_id = self.scenario_set.scenarios[0].id

    # ---------------------------------------------------------------- Execution
    def validate_active(self) -> ValidationReport:
        return validate_scenario(self.active_scenario())

    def run(self, scenario_id: Optional[int] = None, *, seed: Optional[int] = None) -> SimulationResult:
        """Simulate one scenario (the active one by default) and store its results."""
        scenario = self.scenario_set.get(self.active_id if scenario_id is None else scenario_id)
        result = simulate(scenario, seed=seed)
        scenario.results = result
        return result

    def run_all(self, *, seed: Optional[int] = None) -> Dict[int, SimulationResult]:
        """Simulate every valid scenario; invalid ones are skipped and logged."""
        completed: Dict[int, SimulationResult] = {}
        skipped: List[str] = []
        for scenario in self.scenario_set.scenarios:
            try:
                completed[scenario.id] = self.run(scenario.id, seed=seed)
            except ValidationError as exc:
                LOGGER.warning("Skipping scenario %r: %s", scenario.name, exc)
                skipped.append(scenario.name)
        if skipped:
            LOGGER.info("Skipped %d invalid scenario(s)", len(skipped))
        return completed

    def comparison_frame(self) -> pd.DataFrame:
        return self.scenario_set.summary_frame()


__all__ = ["SavingsEngine", "simulate", "validate"]
