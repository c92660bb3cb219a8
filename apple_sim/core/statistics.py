"""Reduce raw savings into summary statistics and a fixed-bin histogram."""

from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from ..config import HISTOGRAM_BINS
from ..models.results import HistogramBin, SavingsStats


def _as_array(savings: Sequence[float]) -> np.ndarray:
    values = np.asarray(savings, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise ValueError("savings must be a non-empty one-dimensional sequence")
    return values


def summarize_savings(savings: Sequence[float]) -> SavingsStats:
    """
    Compute mean, order statistics, sample std and probability of saving.

    Order statistics index the sorted copy directly: the median is
    ``sorted[n // 2]`` (upper median for even ``n``), P10 is
    ``sorted[floor(n * 0.1)]`` and P90 ``sorted[floor(n * 0.9)]``. The
    standard deviation uses ``n - 1`` and is exactly ``0.0`` for a single
    trial or when every trial saved the same amount.
    """
    values = _as_array(savings)
    n = values.size
    ordered = np.sort(values)
    if n > 1 and ordered[0] != ordered[-1]:
        std = float(np.std(values, ddof=1))
    else:
        std = 0.0
    return SavingsStats(
        mean=float(np.mean(values)),
        median=float(ordered[n // 2]),
        std=std,
        min=float(ordered[0]),
        max=float(ordered[-1]),
        p10=float(ordered[math.floor(n * 0.1)]),
        p90=float(ordered[math.floor(n * 0.9)]),
        prob_positive=float(np.count_nonzero(values > 0)) / n,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_histogram(savings: Sequence[float], bins: int = HISTOGRAM_BINS) -> List[HistogramBin]:
    """
    Bin savings into ``bins`` equal-width bins spanning ``[min, max]``.

    The maximum value is clamped into the last bin. When every value is
    identical the range is empty and a single bin holds all trials.
    """
    if bins <= 0:
        raise ValueError("bins must be positive")
    values = _as_array(savings)
    low = float(values.min())
    high = float(values.max())
    if high == low:
        return [HistogramBin(lower_edge=_round_half_up(low), count=int(values.size))]

    width = (high - low) / bins
    index = np.floor((values - low) / width).astype(np.int64)
    index = np.clip(index, 0, bins - 1)
    counts = np.bincount(index, minlength=bins)
    return [
        HistogramBin(lower_edge=_round_half_up(low + i * width), count=int(counts[i]))
        for i in range(bins)
    ]


__all__ = ["build_histogram", "summarize_savings"]
