"""Price-multiplier model definitions (farm-type mode and mixture mode)."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class FullPriceDistribution(str, Enum):
    """How multipliers are drawn for farms in the full-price group."""

    FIXED = "fixed"
    NORMAL = "normal"


class DiscountDistribution(str, Enum):
    """How multipliers are drawn for farms in the discount group."""

    UNIFORM = "uniform"
    BETA = "beta"


class FullPriceSpec(BaseModel):
    """Full-price component of the mixture."""

    dist: FullPriceDistribution = Field(
        default=FullPriceDistribution.FIXED,
        description="'fixed' uses ``multiplier``; 'normal' draws N(mean, std) clipped to [0, 2].",
    )
    multiplier: float = Field(default=1.0, description="Fixed full-price multiplier")
    mean: float = Field(default=1.0, description="Mean of the normal full-price draw")
    std: float = Field(default=0.0, description="Std of the normal full-price draw")


class DiscountSpec(BaseModel):
    """Discount component of the mixture."""

    dist: DiscountDistribution = Field(
        default=DiscountDistribution.UNIFORM,
        description="'uniform' over [min_discount_multiplier, 1) or a rescaled Beta(alpha, beta).",
    )
    alpha: float = Field(default=2.0, description="Beta shape parameter alpha")
    beta: float = Field(default=2.0, description="Beta shape parameter beta")


class FarmTypePricing(BaseModel):
    """Draw a farm type by market share, then a multiplier from its discount range."""

    mode: Literal["farm_types"] = "farm_types"


class MixturePricing(BaseModel):
    """Two-component mixture: full price with probability ``p_full_price``, else discounted."""

    mode: Literal["mixture"] = "mixture"
    p_full_price: float = Field(
        default=0.6, description="Probability that a farm lands in the full-price group"
    )
    min_discount_multiplier: float = Field(
        default=0.6, description="Lowest multiplier reachable by the discount group"
    )
    full_price: FullPriceSpec = Field(default_factory=FullPriceSpec)
    discount: DiscountSpec = Field(default_factory=DiscountSpec)


PriceModel = Annotated[
    Union[FarmTypePricing, MixturePricing], Field(discriminator="mode")
]


__all__ = [
    "DiscountDistribution",
    "DiscountSpec",
    "FarmTypePricing",
    "FullPriceDistribution",
    "FullPriceSpec",
    "MixturePricing",
    "PriceModel",
]
