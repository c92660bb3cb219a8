"""Monte Carlo trial loop producing per-trial savings versus last year."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ..config import TRIAL_BLOCK_SIZE
from ..models.scenario import Scenario
from .rng import SeededRNG
from .sampler import Sampler


def simulate_block(
    scenario: Scenario, rng: SeededRNG, sampler: Sampler, trials: int
) -> np.ndarray:
    """
    Savings for ``trials`` consecutive purchasing years drawn together.

    Farm counts for the block are drawn first, then every multiplier of the
    block in one call to the sampler. This year's spend is
    ``sum(multiplier * avg_price) * last_year_farms / n_farms``, which reduces
    to ``last_year_cost * mean(multiplier)`` for each trial.
    """
    n_farms = rng.uniform_int(scenario.min_new_farms, scenario.max_new_farms, size=trials)
    multipliers = sampler.draw(rng, int(n_farms.sum()))
    starts = np.concatenate(([0], np.cumsum(n_farms)[:-1]))

    # Mean as the first multiplier plus the mean deviation from it, so that
    # identical multipliers yield that multiplier exactly.
    first = multipliers[starts]
    deviation = multipliers - np.repeat(first, n_farms)
    mean_multiplier = first + np.add.reduceat(deviation, starts) / n_farms
    return scenario.last_year_cost - scenario.last_year_cost * mean_multiplier


def simulate_savings(
    scenario: Scenario,
    rng: SeededRNG,
    sampler: Sampler,
    *,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    block_size: int = TRIAL_BLOCK_SIZE,
) -> np.ndarray:
    """
    Run ``scenario.trials`` trials against one advancing RNG.

    Trials are drawn in blocks of ``block_size``; for a given seed and block
    size the output is identical between runs. Returns savings in trial order.
    ``progress_callback(done, total)`` is invoked after every block, the last
    call being ``(total, total)``.
    """
    if scenario.min_new_farms <= 0:
        raise ValueError("min_new_farms must be positive")
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    total = scenario.trials
    savings = np.empty(total, dtype=float)

    for start in range(0, total, block_size):
        stop = min(start + block_size, total)
        savings[start:stop] = simulate_block(scenario, rng, sampler, stop - start)
        if progress_callback:
            progress_callback(stop, total)
    return savings


__all__ = ["simulate_block", "simulate_savings"]
