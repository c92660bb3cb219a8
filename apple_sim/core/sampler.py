"""Per-farm price multiplier samplers for the two pricing modes."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ..config import FULL_PRICE_CLIP
from ..models.pricing import (
    DiscountDistribution,
    FarmTypePricing,
    FullPriceDistribution,
    MixturePricing,
)
from ..models.scenario import FarmType
from .rng import SeededRNG
from .validator import validate_mixture

_BELOW_FULL_PRICE = np.nextafter(1.0, 0.0)


class ConfigurationError(Exception):
    """Unsupported pricing mode or distribution parameters reached the sampler."""


class FarmTypeSampler:
    """Pick a farm type by normalised market share, then a multiplier from its range."""

    mode = "farm_types"

    def __init__(self, farm_types: Sequence[FarmType]) -> None:
        if not farm_types:
            raise ConfigurationError("Farm-type pricing requires at least one farm type.")
        shares = np.array([ft.share_percent for ft in farm_types], dtype=float)
        total = float(shares.sum())
        if np.any(shares < 0) or not (np.isfinite(total) and total > 0):
            raise ConfigurationError("Farm-type shares must be non-negative with a positive sum.")
        self.probabilities = shares / total
        self.cumulative = np.cumsum(self.probabilities)
        self.low = np.array([1.0 - ft.max_discount / 100.0 for ft in farm_types])
        self.high = np.array([1.0 - ft.min_discount / 100.0 for ft in farm_types])

    def draw(self, rng: SeededRNG, n_farms: int) -> np.ndarray:
        type_index = rng.choose(self.cumulative, size=n_farms)
        return rng.uniform_real(self.low[type_index], self.high[type_index])


class MixtureSampler:
    """
    Two-component mixture of full-price and discounted farms.

    Each farm lands in the full-price group with probability ``p_full_price``;
    full-price farms take the fixed multiplier (or a normal draw clipped to
    ``[0, 2]``), discounted farms draw from ``[min_discount_multiplier, 1)``
    either uniformly or via a Beta sample rescaled onto that interval.
    Farm types play no part in this mode.
    """

    mode = "mixture"

    def __init__(self, pricing: MixturePricing) -> None:
        errors = validate_mixture(pricing)
        if errors:
            details = "; ".join(f"{key}: {msg}" for key, msg in errors.items())
            raise ConfigurationError(f"Invalid mixture parameters: {details}")
        try:
            FullPriceDistribution(pricing.full_price.dist)
            DiscountDistribution(pricing.discount.dist)
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported distribution: {exc}") from exc
        self.pricing = pricing

    def _full_price(self, rng: SeededRNG, count: int) -> np.ndarray:
        spec = self.pricing.full_price
        if spec.dist == FullPriceDistribution.FIXED:
            return np.full(count, spec.multiplier, dtype=float)
        low, high = FULL_PRICE_CLIP
        return np.clip(rng.normal(spec.mean, spec.std, count), low, high)

    def _discounted(self, rng: SeededRNG, count: int) -> np.ndarray:
        floor = self.pricing.min_discount_multiplier
        spec = self.pricing.discount
        if spec.dist == DiscountDistribution.UNIFORM:
            draws = rng.uniform_real(floor, 1.0, count)
        else:
            draws = floor + rng.beta(spec.alpha, spec.beta, count) * (1.0 - floor)
        # Discounted multipliers stay strictly below 1.0, including Beta draws of exactly 1.
        return np.minimum(draws, _BELOW_FULL_PRICE)

    def draw(self, rng: SeededRNG, n_farms: int) -> np.ndarray:
        full_price = rng.bernoulli(self.pricing.p_full_price, n_farms)
        multipliers = np.empty(n_farms, dtype=float)
        n_full = int(full_price.sum())
        multipliers[full_price] = self._full_price(rng, n_full)
        multipliers[~full_price] = self._discounted(rng, n_farms - n_full)
        return multipliers


Sampler = Union[FarmTypeSampler, MixtureSampler]


def build_sampler(price_model: object, farm_types: Sequence[FarmType]) -> Sampler:
    """Return the sampler for the active pricing mode."""
    if isinstance(price_model, FarmTypePricing):
        return FarmTypeSampler(farm_types)
    if isinstance(price_model, MixturePricing):
        return MixtureSampler(price_model)
    mode = getattr(price_model, "mode", price_model)
    raise ConfigurationError(f"Unsupported pricing mode: {mode!r}")


__all__ = [
    "ConfigurationError",
    "FarmTypeSampler",
    "MixtureSampler",
    "Sampler",
    "build_sampler",
]
