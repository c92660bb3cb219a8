import unittest

from apple_sim.core.scenario_generator import build_base_case
from apple_sim.core.validator import ValidationError, validate_scenario
from apple_sim.models.pricing import DiscountSpec, FullPriceSpec, MixturePricing
from apple_sim.models.scenario import FarmType


class ScenarioValidatorTests(unittest.TestCase):
    def test_base_case_is_valid(self) -> None:
        report = validate_scenario(build_base_case())
        self.assertTrue(report.ok)
        self.assertEqual(report.errors, {})

    def test_report_unpacks_to_flag_and_errors(self) -> None:
        ok, errors = validate_scenario(build_base_case(trials=0))
        self.assertFalse(ok)
        self.assertIn("trials", errors)

    def test_reports_all_errors_together(self) -> None:
        scenario = build_base_case(
            min_new_farms=10,
            max_new_farms=5,
            trials=300_000,
            farm_types=[
                FarmType(id=1, name="A", share_percent=60),
                FarmType(id=2, name="B", share_percent=10, min_discount=5, max_discount=10),
                FarmType(id=3, name="C", share_percent=10, min_discount=15, max_discount=25),
            ],
        )
        report = validate_scenario(scenario)
        self.assertFalse(report.ok)
        self.assertGreaterEqual(len(report.errors), 3)
        self.assertIn("new_farms_range", report.errors)
        self.assertIn("trials", report.errors)
        self.assertIn("farm_types", report.errors)
        self.assertIn("80.0", report.errors["farm_types"])

    def test_non_positive_fields(self) -> None:
        scenario = build_base_case(
            last_year_cost=0, last_year_farms=-1, min_new_farms=0, max_new_farms=0
        )
        errors = validate_scenario(scenario).errors
        for name in ("last_year_cost", "last_year_farms", "min_new_farms", "max_new_farms"):
            self.assertEqual(errors[name], "Must be greater than 0")

    def test_share_sum_tolerance(self) -> None:
        farm_types = [
            FarmType(id=1, share_percent=60.2),
            FarmType(id=2, share_percent=40.2, min_discount=5, max_discount=10),
        ]
        self.assertTrue(validate_scenario(build_base_case(farm_types=farm_types)).ok)
        farm_types[1] = FarmType(id=2, share_percent=40.6)
        errors = validate_scenario(build_base_case(farm_types=farm_types)).errors
        self.assertEqual(errors["farm_types"], "Shares must sum to 100% (currently 100.8%)")

    def test_farm_type_ranges(self) -> None:
        farm_types = [
            FarmType(id=1, share_percent=100, min_discount=30, max_discount=20),
            FarmType(id=2, share_percent=0, min_discount=-5, max_discount=120),
        ]
        errors = validate_scenario(build_base_case(farm_types=farm_types)).errors
        self.assertIn("farm_types[0].discount_range", errors)
        self.assertIn("farm_types[1].min_discount", errors)
        self.assertIn("farm_types[1].max_discount", errors)
        self.assertNotIn("farm_types[1].share_percent", errors)

    def test_requires_a_farm_type(self) -> None:
        errors = validate_scenario(build_base_case(farm_types=[])).errors
        self.assertEqual(errors["farm_types"], "At least one farm type is required")

    def test_mixture_parameters(self) -> None:
        pricing = MixturePricing(p_full_price=1.5, min_discount_multiplier=1.0)
        errors = validate_scenario(build_base_case(price_model=pricing)).errors
        self.assertEqual(errors["price_model.min_discount_multiplier"], "Must be less than 1.0")
        self.assertIn("price_model.p_full_price", errors)

    def test_mixture_beta_shapes(self) -> None:
        pricing = MixturePricing(discount=DiscountSpec(dist="beta", alpha=0, beta=-1))
        errors = validate_scenario(build_base_case(price_model=pricing)).errors
        self.assertIn("price_model.discount.alpha", errors)
        self.assertIn("price_model.discount.beta", errors)

    def test_non_finite_fields_are_rejected(self) -> None:
        for bad in (float("nan"), float("inf")):
            errors = validate_scenario(build_base_case(last_year_cost=bad)).errors
            self.assertEqual(errors["last_year_cost"], "Must be a finite number")
        nan_share = [FarmType(id=1, share_percent=float("nan"), min_discount=5, max_discount=10)]
        errors = validate_scenario(build_base_case(farm_types=nan_share)).errors
        self.assertIn("farm_types", errors)
        self.assertIn("farm_types[0].share_percent", errors)
        nan_discount = [FarmType(id=1, share_percent=100, min_discount=float("nan"), max_discount=10)]
        errors = validate_scenario(build_base_case(farm_types=nan_discount)).errors
        self.assertIn("farm_types[0].min_discount", errors)

    def test_non_finite_mixture_parameters_are_rejected(self) -> None:
        nan = float("nan")
        pricing = MixturePricing(p_full_price=nan, min_discount_multiplier=nan)
        errors = validate_scenario(build_base_case(price_model=pricing)).errors
        self.assertEqual(errors["price_model.min_discount_multiplier"], "Must be greater than 0")
        self.assertIn("price_model.p_full_price", errors)

        pricing = MixturePricing(
            full_price=FullPriceSpec(dist="normal", mean=nan, std=float("inf")),
            discount=DiscountSpec(dist="beta", alpha=nan, beta=float("inf")),
        )
        errors = validate_scenario(build_base_case(price_model=pricing)).errors
        self.assertIn("price_model.full_price.mean", errors)
        self.assertIn("price_model.full_price.std", errors)
        self.assertEqual(errors["price_model.discount.alpha"], "Must be a finite number")
        self.assertEqual(errors["price_model.discount.beta"], "Must be a finite number")

        fixed = MixturePricing(full_price=FullPriceSpec(multiplier=nan))
        errors = validate_scenario(build_base_case(price_model=fixed)).errors
        self.assertIn("price_model.full_price.multiplier", errors)

    def test_raise_for_errors_carries_mapping(self) -> None:
        report = validate_scenario(build_base_case(trials=0))
        with self.assertRaises(ValidationError) as ctx:
            report.raise_for_errors()
        self.assertIn("trials", ctx.exception.errors)


if __name__ == "__main__":
    unittest.main()
