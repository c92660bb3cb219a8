"""Result data models produced by a simulation run."""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class SavingsStats(BaseModel):
    """Summary statistics of the per-trial savings."""

    mean: float
    median: float = Field(..., description="Upper median: sorted[n // 2]")
    std: float = Field(..., description="Sample standard deviation (N-1); 0.0 for one trial")
    min: float
    max: float
    p10: float
    p90: float
    prob_positive: float = Field(..., description="Fraction of trials with savings > 0")


class HistogramBin(BaseModel):
    """Single histogram bar: rounded lower edge and trial count."""

    lower_edge: int
    count: int


class SimulationResult(BaseModel):
    """Savings distribution, statistics and histogram for one scenario run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    scenario_id: int = Field(..., description="Scenario that produced the result")
    savings: np.ndarray = Field(..., description="Per-trial savings in trial order")
    stats: SavingsStats
    histogram: List[HistogramBin] = Field(default_factory=list)
    seed: int = Field(..., description="Seed used for the run")
    mode: str = Field(..., description="Price model mode used for the run")
    metadata: Dict[str, object] = Field(default_factory=dict)

    @property
    def trials(self) -> int:
        return int(self.savings.size)

    def histogram_frame(self) -> pd.DataFrame:
        """Return the histogram as a dataframe with ``lower_edge`` and ``count`` columns."""
        return pd.DataFrame(
            [{"lower_edge": b.lower_edge, "count": b.count} for b in self.histogram],
            columns=["lower_edge", "count"],
        )

    def comparison_row(self) -> Dict[str, Optional[float]]:
        """Fields read by the scenario comparison view."""
        return {
            "median": self.stats.median,
            "p10": self.stats.p10,
            "p90": self.stats.p90,
            "prob_positive": self.stats.prob_positive,
        }


__all__ = ["HistogramBin", "SavingsStats", "SimulationResult"]
