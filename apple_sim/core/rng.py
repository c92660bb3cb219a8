"""Seeded random number source shared by every draw of a simulation run."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

ArrayLike = Union[float, Sequence[float], np.ndarray]


class SeededRNG:
    """
    Deterministic generator wrapping a single ``numpy.random.Generator``.

    All draws (uniform, integer, categorical and the mixture helpers) advance
    the same underlying state, so a run is fully determined by the seed and
    the order in which draws are requested.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed)

    def uniform_real(self, low: ArrayLike, high: ArrayLike, size: Optional[int] = None):
        """Draw from ``[low, high)``; ``low == high`` returns ``low`` exactly."""
        return self._generator.uniform(low, high, size)

    def uniform_int(self, low: int, high: int, size: Optional[int] = None):
        """Draw integers from ``[low, high]`` inclusive."""
        if size is None:
            return int(self._generator.integers(low, high, endpoint=True))
        return self._generator.integers(low, high, size=size, endpoint=True)

    def categorical(self, probabilities: Sequence[float], size: Optional[int] = None):
        """
        Draw category indices with probability proportional to ``probabilities``.

        Weights are normalised here; see :meth:`choose` for the draw itself.
        """
        weights = np.asarray(probabilities, dtype=float)
        if weights.ndim != 1 or weights.size == 0:
            raise ValueError("probabilities must be a non-empty sequence")
        if np.any(weights < 0):
            raise ValueError("probabilities cannot be negative")
        total = float(weights.sum())
        if not (math.isfinite(total) and total > 0):
            raise ValueError("probabilities must sum to a finite positive value")
        return self.choose(np.cumsum(weights / total), size)

    def choose(self, cumulative: np.ndarray, size: Optional[int] = None):
        """
        Draw indices against precomputed normalised cumulative weights.

        A uniform draw walks the cumulative sum and the first index whose
        cumulative weight exceeds it wins; rounding that leaves the draw above
        the final cumulative value maps to the last index.
        """
        draws = self._generator.random(size)
        indices = np.searchsorted(cumulative, draws, side="right")
        indices = np.minimum(indices, cumulative.size - 1)
        if size is None:
            return int(indices)
        return indices

    def bernoulli(self, probability: float, size: Optional[int] = None):
        """Return ``True`` with the given probability (``1.0`` always succeeds)."""
        return self._generator.random(size) < probability

    def normal(self, mean: float, std: float, size: Optional[int] = None):
        return self._generator.normal(mean, std, size)

    def beta(self, alpha: float, beta: float, size: Optional[int] = None):
        return self._generator.beta(alpha, beta, size)


__all__ = ["SeededRNG"]
