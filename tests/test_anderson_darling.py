import math
import unittest
import warnings

import numpy as np
from scipy.stats import norm
from statsmodels.stats.diagnostic import normal_ad

from spc_normality.errors import DegenerateSample, InsufficientData
from spc_normality.normality_tests import run_ad_test
from spc_normality.normality_tests.anderson_darling_core import (
    ad_p_value,
    adjust_ad_statistic,
    compute_ad_statistic,
)

TEXTBOOK = [2, 4, 4, 4, 5, 5, 7, 9]


class TestAndersonDarling(unittest.TestCase):
    def test_textbook_sample(self):
        x = np.array(TEXTBOOK, dtype=float)
        result = run_ad_test(x)
        stat, p = normal_ad(x)
        self.assertEqual(result.method, "Anderson-Darling")
        self.assertAlmostEqual(result.statistic, float(stat), delta=1e-3)
        self.assertAlmostEqual(result.p_value, float(p), delta=1e-3)
        self.assertEqual(result.decision, "Do not reject normality")

    def test_matches_statsmodels(self):
        rng = np.random.default_rng(31)
        samples = []
        for n in (3, 7, 15, 40, 250, 2000):
            samples.append(rng.normal(-4.0, 0.5, size=n))
        for n in (12, 60, 500):
            samples.append(rng.lognormal(0.0, 0.8, size=n))
        for x in samples:
            with self.subTest(n=x.size):
                ours = run_ad_test(x)
                stat, p = normal_ad(x)
                self.assertTrue(np.isfinite(ours.statistic))
                if np.isfinite(stat):
                    self.assertAlmostEqual(ours.statistic, float(stat), delta=1e-9 * max(1.0, float(stat)))
                    self.assertAlmostEqual(ours.p_value, float(p), delta=1e-9)
                else:
                    self.assertLess(ours.p_value, 0.01)

    def test_adjusted_statistic(self):
        x = np.random.default_rng(4).normal(size=25)
        result = run_ad_test(x)
        self.assertAlmostEqual(result.adjusted_statistic, result.statistic * (1 + 0.75 / 25 + 2.25 / 625))
        self.assertAlmostEqual(ad_p_value(result.adjusted_statistic), result.p_value)

    def test_statistic_of_quantile_sample_is_small(self):
        z = np.array([-1.5, -0.5, 0.0, 0.5, 1.5])
        self.assertAlmostEqual(compute_ad_statistic(z), compute_ad_statistic(np.sort(-z)))
        self.assertLess(adjust_ad_statistic(compute_ad_statistic(z), 5), 0.6)

    def test_p_value_branches(self):
        for a in (0.1, 0.25, 0.45, 1.0):
            with self.subTest(a=a):
                p = ad_p_value(a)
                self.assertGreater(p, 0.0)
                self.assertLess(p, 1.0)
        self.assertAlmostEqual(ad_p_value(0.1), 1 - math.exp(-13.436 + 10.114 - 2.2373))
        self.assertAlmostEqual(ad_p_value(1.0), math.exp(1.2937 - 5.709 + 0.0186))
        self.assertEqual(ad_p_value(20.0), 0.0)
        self.assertAlmostEqual(ad_p_value(0.0), 1.0 - math.exp(-13.436))

    def test_p_value_decreasing(self):
        ps = [ad_p_value(a) for a in (0.1, 0.3, 0.5, 1.0, 2.0, 5.0)]
        self.assertTrue(all(p1 >= p2 for p1, p2 in zip(ps, ps[1:])))

    def test_rejects_skewed_sample(self):
        x = np.random.default_rng(8).exponential(1.0, size=150)
        result = run_ad_test(x)
        self.assertLess(result.p_value, 0.01)
        self.assertEqual(result.decision, "Reject normality")

    def test_small_sample_note_and_warning(self):
        x = np.array([1.0, 2.5, 2.0, 4.0, 3.1])
        with self.assertLogs("spc_normality.normality_tests.anderson_darling_core", level="WARNING"):
            result = run_ad_test(x)
        self.assertTrue(any("Small sample" in note for note in result.notes))

    def test_input_not_modified(self):
        x = np.array([3.0, 9.0, 1.0, 4.0, 4.0, 7.0, 2.0])
        x.flags.writeable = False
        run_ad_test(x)
        np.testing.assert_array_equal(x, [3.0, 9.0, 1.0, 4.0, 4.0, 7.0, 2.0])

    def test_sample_size_bounds(self):
        with self.assertRaises(InsufficientData):
            run_ad_test(np.array([1.0, 2.0]))
        with self.assertRaises(InsufficientData):
            run_ad_test(np.array([1.0]))

    def test_constant_sample(self):
        with self.assertRaises(DegenerateSample):
            run_ad_test(np.full(12, -1.0))

    def test_far_outlier_gives_finite_statistic(self):
        x = np.r_[np.linspace(-1.0, 1.0, 200), 1000.0]
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            result = run_ad_test(x)
        self.assertTrue(np.isfinite(result.statistic))
        self.assertTrue(np.isfinite(result.adjusted_statistic))
        self.assertTrue(result.rejects_normality)

    def test_log_terms_match_direct_formula(self):
        z = np.sort(np.random.default_rng(6).normal(size=30))
        F = norm.cdf(z)
        i = np.arange(1, 31)
        direct = -30 - np.sum((2 * i - 1) / 30 * (np.log(F) + np.log1p(-F[::-1])))
        self.assertAlmostEqual(compute_ad_statistic(z), float(direct), places=10)

    def test_large_sample_note(self):
        x = np.random.default_rng(10).normal(size=5001)
        result = run_ad_test(x)
        self.assertEqual(result.n, 5001)
        self.assertTrue(any("Very large sample" in note for note in result.notes))
        small = run_ad_test(x[:5000])
        self.assertFalse(any("Very large sample" in note for note in small.notes))

    def test_near_constant_sample(self):
        with self.assertRaises(DegenerateSample):
            run_ad_test(np.array([0.0, 0.0, 1e-20, 0.0]))


if __name__ == "__main__":
    unittest.main()
