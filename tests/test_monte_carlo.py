import time
import unittest

import numpy as np

from apple_sim.config import MAX_TRIALS
from apple_sim.core.monte_carlo import simulate_block, simulate_savings
from apple_sim.core.rng import SeededRNG
from apple_sim.core.sampler import FarmTypeSampler
from apple_sim.core.scenario_generator import build_base_case, default_farm_types
from apple_sim.core.validator import ValidationError
from apple_sim.engine import simulate
from apple_sim.models.pricing import DiscountSpec, MixturePricing
from apple_sim.models.scenario import FarmType


def _fixed_discount_scenario(**overrides):
    payload = dict(
        last_year_cost=1_000_000,
        last_year_farms=30,
        min_new_farms=30,
        max_new_farms=30,
        trials=1000,
        farm_types=[FarmType(id=1, name="Ten off", share_percent=100, min_discount=10, max_discount=10)],
    )
    payload.update(overrides)
    return build_base_case(**payload)


class SimulateTests(unittest.TestCase):
    def test_fixed_ten_percent_discount(self) -> None:
        result = simulate(_fixed_discount_scenario())
        self.assertEqual(result.savings.size, 1000)
        self.assertTrue(np.all(result.savings == 100_000.0))
        stats = result.stats
        for value in (stats.mean, stats.median, stats.p10, stats.p90, stats.min, stats.max):
            self.assertEqual(value, 100_000.0)
        self.assertEqual(stats.std, 0.0)
        self.assertEqual(stats.prob_positive, 1.0)
        self.assertEqual(sum(b.count for b in result.histogram), 1000)

    def test_same_seed_is_bit_identical(self) -> None:
        scenario = build_base_case(trials=2000)
        first = simulate(scenario)
        second = simulate(scenario)
        self.assertTrue(np.array_equal(first.savings, second.savings))
        self.assertEqual(first.stats, second.stats)
        self.assertEqual(first.seed, 42)

    def test_seed_changes_output(self) -> None:
        scenario = build_base_case(trials=500)
        self.assertFalse(
            np.array_equal(simulate(scenario, seed=1).savings, simulate(scenario, seed=2).savings)
        )

    def test_explicit_seed_overrides_scenario_seed(self) -> None:
        explicit = simulate(build_base_case(trials=300), seed=7)
        stored = simulate(build_base_case(trials=300, seed=7))
        self.assertTrue(np.array_equal(explicit.savings, stored.savings))
        self.assertEqual(stored.seed, 7)

    def test_histogram_covers_all_trials(self) -> None:
        result = simulate(build_base_case(trials=5000))
        self.assertEqual(len(result.histogram), 40)
        self.assertEqual(sum(b.count for b in result.histogram), 5000)
        self.assertEqual(result.histogram_frame()["count"].sum(), 5000)

    def test_base_case_saves_money_on_average(self) -> None:
        stats = simulate(build_base_case(trials=5000)).stats
        # Expected multiplier is 0.94375, i.e. roughly 56,250 saved.
        self.assertAlmostEqual(stats.mean, 56_250, delta=2_000)
        self.assertLessEqual(stats.p10, stats.median)
        self.assertLessEqual(stats.median, stats.p90)

    def test_single_trial(self) -> None:
        result = simulate(build_base_case(trials=1))
        self.assertEqual(result.savings.size, 1)
        self.assertEqual(result.stats.std, 0.0)
        self.assertEqual(len(result.histogram), 1)

    def test_invalid_scenario_is_not_simulated(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            simulate(build_base_case(min_new_farms=10, max_new_farms=5))
        self.assertIn("new_farms_range", ctx.exception.errors)

    def test_progress_callback_reports_completion(self) -> None:
        calls = []
        simulate(build_base_case(trials=250), progress_callback=lambda done, total: calls.append((done, total)))
        self.assertEqual(calls[-1], (250, 250))

    def test_progress_callback_reports_each_block(self) -> None:
        calls = []
        scenario = build_base_case(trials=25_000)
        simulate_savings(
            scenario,
            SeededRNG(42),
            FarmTypeSampler(scenario.farm_types),
            progress_callback=lambda done, total: calls.append((done, total)),
        )
        self.assertEqual(calls, [(10_000, 25_000), (20_000, 25_000), (25_000, 25_000)])

    def test_non_finite_cost_is_not_simulated(self) -> None:
        for bad in (float("nan"), float("inf")):
            with self.assertRaises(ValidationError) as ctx:
                simulate(build_base_case(last_year_cost=bad))
            self.assertIn("last_year_cost", ctx.exception.errors)

    def test_largest_run_finishes_quickly(self) -> None:
        scenario = build_base_case(min_new_farms=30, max_new_farms=60, trials=MAX_TRIALS)
        started = time.perf_counter()
        result = simulate(scenario)
        self.assertLess(time.perf_counter() - started, 5.0)
        self.assertEqual(result.savings.size, MAX_TRIALS)


class MixtureModeTests(unittest.TestCase):
    def test_full_price_degeneracy(self) -> None:
        scenario = build_base_case(trials=1000, price_model=MixturePricing(p_full_price=1.0))
        result = simulate(scenario)
        self.assertTrue(np.all(result.savings == 0.0))
        self.assertEqual(result.stats.std, 0.0)
        self.assertEqual(result.mode, "mixture")

    def test_pure_discount_saves_money(self) -> None:
        scenario = build_base_case(
            trials=2000,
            price_model=MixturePricing(p_full_price=0.0, min_discount_multiplier=0.8),
        )
        stats = simulate(scenario).stats
        self.assertGreater(stats.mean, 0)
        self.assertGreater(stats.prob_positive, 0.99)
        # Uniform on [0.8, 1) has mean 0.9.
        self.assertAlmostEqual(stats.mean, 100_000, delta=3_000)

    def test_beta_discount_runs(self) -> None:
        pricing = MixturePricing(
            p_full_price=0.5,
            min_discount_multiplier=0.6,
            discount=DiscountSpec(dist="beta", alpha=2.0, beta=2.0),
        )
        result = simulate(build_base_case(trials=1000, price_model=pricing))
        self.assertEqual(result.savings.size, 1000)
        self.assertTrue(np.all(np.isfinite(result.savings)))

    def test_mixture_ignores_farm_types(self) -> None:
        pricing = MixturePricing(p_full_price=0.4)
        altered = [FarmType(id=9, share_percent=100, min_discount=50, max_discount=60)]
        first = simulate(build_base_case(trials=500, price_model=pricing))
        second = simulate(build_base_case(trials=500, price_model=pricing, farm_types=altered))
        self.assertTrue(np.array_equal(first.savings, second.savings))


class SimulateSavingsTests(unittest.TestCase):
    def test_scaling_shares_leaves_output_unchanged(self) -> None:
        scenario = build_base_case(trials=1000)
        baseline = simulate_savings(scenario, SeededRNG(42), FarmTypeSampler(default_farm_types()))
        for factor in (0.5, 2.0):
            scaled_types = [
                ft.model_copy(update={"share_percent": ft.share_percent * factor})
                for ft in default_farm_types()
            ]
            scaled = simulate_savings(scenario, SeededRNG(42), FarmTypeSampler(scaled_types))
            np.testing.assert_allclose(scaled, baseline, rtol=1e-12)

    def test_equal_farm_bounds(self) -> None:
        scenario = build_base_case(min_new_farms=12, max_new_farms=12, trials=200)
        savings = simulate_savings(scenario, SeededRNG(5), FarmTypeSampler(scenario.farm_types))
        self.assertEqual(savings.size, 200)
        self.assertGreater(len(np.unique(savings)), 1)

    def test_block_uses_each_trials_own_farm_count(self) -> None:
        farm_types = [
            FarmType(id=1, name="Full", share_percent=50),
            FarmType(id=2, name="Half off", share_percent=50, min_discount=50, max_discount=50),
        ]
        scenario = build_base_case(
            last_year_cost=1_000, min_new_farms=1, max_new_farms=1, trials=400, farm_types=farm_types
        )
        savings = simulate_block(scenario, SeededRNG(3), FarmTypeSampler(farm_types), 400)
        # One farm per trial: it either pays full price or half price.
        self.assertEqual(set(np.unique(savings).tolist()), {0.0, 500.0})

    def test_block_size_does_not_change_determinism(self) -> None:
        scenario = build_base_case(trials=3000)
        sampler = FarmTypeSampler(scenario.farm_types)
        first = simulate_savings(scenario, SeededRNG(11), sampler, block_size=700)
        second = simulate_savings(scenario, SeededRNG(11), sampler, block_size=700)
        self.assertTrue(np.array_equal(first, second))
        self.assertEqual(first.size, 3000)


if __name__ == "__main__":
    unittest.main()
