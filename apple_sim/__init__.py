"""Monte Carlo estimator of apple purchasing savings across a mix of farms."""

from __future__ import annotations

from .core.sampler import ConfigurationError
from .core.validator import ValidationError, ValidationReport
from .engine import SavingsEngine, simulate, validate
from .models.results import HistogramBin, SavingsStats, SimulationResult
from .models.scenario import FarmType, Scenario, ScenarioSet

__all__ = [
    "ConfigurationError",
    "FarmType",
    "HistogramBin",
    "SavingsEngine",
    "SavingsStats",
    "Scenario",
    "ScenarioSet",
    "SimulationResult",
    "ValidationError",
    "ValidationReport",
    "simulate",
    "validate",
]
