"""Input validation for scenarios prior to simulation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import MAX_TRIALS, SHARE_SUM_TOLERANCE
from ..models.pricing import DiscountDistribution, FullPriceDistribution, MixturePricing
from ..models.scenario import Scenario


class ValidationError(Exception):
    """Raised when user supplied scenario inputs are unusable."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.errors: Dict[str, str] = dict(errors or {})


@dataclass
class ValidationReport:
    """Outcome of validating a scenario: overall flag plus field-keyed messages."""

    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def __iter__(self):
        # Allows ``ok, errors = validate_scenario(scenario)``.
        yield self.ok
        yield self.errors

    def raise_for_errors(self, scenario_name: str = "scenario") -> None:
        if self.errors:
            details = "; ".join(f"{key}: {msg}" for key, msg in self.errors.items())
            raise ValidationError(f"Invalid {scenario_name}: {details}", self.errors)


def _check_range(value: float, low: float, high: float) -> bool:
    return low <= value <= high


def _positive_error(value: float) -> Optional[str]:
    if not math.isfinite(value):
        return "Must be a finite number"
    if not value > 0:
        return "Must be greater than 0"
    return None


def validate_scenario(scenario: Scenario) -> ValidationReport:
    """Check every numeric field and farm type; all problems are reported together."""
    errors: Dict[str, str] = {}

    for name in ("last_year_cost", "last_year_farms", "min_new_farms", "max_new_farms"):
        message = _positive_error(getattr(scenario, name))
        if message:
            errors[name] = message
    if scenario.min_new_farms > scenario.max_new_farms:
        errors["new_farms_range"] = "Min farms cannot exceed max farms"
    if scenario.trials <= 0 or scenario.trials > MAX_TRIALS:
        errors["trials"] = f"Must be between 1 and {MAX_TRIALS:,}"

    if not scenario.farm_types:
        errors["farm_types"] = "At least one farm type is required"
    else:
        total_share = sum(ft.share_percent for ft in scenario.farm_types)
        if not abs(total_share - 100.0) <= SHARE_SUM_TOLERANCE:
            errors["farm_types"] = (
                f"Shares must sum to 100% (currently {total_share:.1f}%)"
            )

    for idx, farm_type in enumerate(scenario.farm_types):
        prefix = f"farm_types[{idx}]"
        if not _check_range(farm_type.share_percent, 0.0, 100.0):
            errors[f"{prefix}.share_percent"] = "Must be 0-100"
        if not _check_range(farm_type.min_discount, 0.0, 100.0):
            errors[f"{prefix}.min_discount"] = "Must be 0-100"
        if not _check_range(farm_type.max_discount, 0.0, 100.0):
            errors[f"{prefix}.max_discount"] = "Must be 0-100"
        if farm_type.min_discount > farm_type.max_discount:
            errors[f"{prefix}.discount_range"] = "Max must be >= min"

    if isinstance(scenario.price_model, MixturePricing):
        errors.update(validate_mixture(scenario.price_model))

    return ValidationReport(errors=errors)


def validate_mixture(pricing: MixturePricing) -> Dict[str, str]:
    """Field errors for mixture-mode parameters."""
    errors: Dict[str, str] = {}
    prefix = "price_model"
    if not _check_range(pricing.p_full_price, 0.0, 1.0):
        errors[f"{prefix}.p_full_price"] = "Must be between 0 and 1"
    floor = pricing.min_discount_multiplier
    if floor >= 1.0:
        errors[f"{prefix}.min_discount_multiplier"] = "Must be less than 1.0"
    elif not floor > 0.0:
        errors[f"{prefix}.min_discount_multiplier"] = "Must be greater than 0"

    full_price = pricing.full_price
    if full_price.dist == FullPriceDistribution.NORMAL:
        if not math.isfinite(full_price.mean):
            errors[f"{prefix}.full_price.mean"] = "Must be a finite number"
        if not (math.isfinite(full_price.std) and full_price.std >= 0):
            errors[f"{prefix}.full_price.std"] = "Must be non-negative"
    elif not math.isfinite(full_price.multiplier):
        errors[f"{prefix}.full_price.multiplier"] = "Must be a finite number"

    if pricing.discount.dist == DiscountDistribution.BETA:
        for name in ("alpha", "beta"):
            message = _positive_error(getattr(pricing.discount, name))
            if message:
                errors[f"{prefix}.discount.{name}"] = message
    return errors


__all__ = ["ValidationError", "ValidationReport", "validate_mixture", "validate_scenario"]
