import unittest

import numpy as np
from scipy.stats import norm

from spc_normality.diagnostics import compute_qq, extract_sample


class TestComputeQQ(unittest.TestCase):
    def test_order_statistics_identity(self):
        rng = np.random.default_rng(3)
        x = extract_sample(rng.normal(50.0, 4.0, size=37))
        qq = compute_qq(x)
        np.testing.assert_array_equal(qq.sample_quantiles, np.sort(x))
        np.testing.assert_array_equal(x[qq.order], qq.sample_quantiles)

    def test_hazen_plotting_positions(self):
        x = extract_sample([4.0, 1.0, 3.0, 2.0, 5.0, 9.0])
        qq = compute_qq(x)
        n = x.size
        expected = norm.ppf((np.arange(1, n + 1) - 0.5) / n)
        np.testing.assert_allclose(qq.theoretical_quantiles, expected, rtol=1e-12, atol=1e-12)
        self.assertEqual(qq.theoretical_quantiles.size, qq.sample_quantiles.size)

    def test_ties_keep_original_order(self):
        x = extract_sample([3.0, 1.0, 3.0, 2.0, 1.0])
        qq = compute_qq(x)
        np.testing.assert_array_equal(qq.order, [1, 4, 3, 0, 2])

    def test_sample_not_modified(self):
        values = [5.0, 3.0, 4.0, 1.0]
        x = extract_sample(values)
        compute_qq(x)
        np.testing.assert_array_equal(x, values)
        self.assertFalse(x.flags.writeable)

    def test_quartile_reference_line(self):
        # Hazen quartiles of 1..9 are 2.75 and 7.25
        qq = compute_qq(extract_sample(np.arange(1, 10)))
        z75 = norm.ppf(0.75)
        self.assertAlmostEqual(qq.slope, 4.5 / (2 * z75))
        self.assertAlmostEqual(qq.intercept, 5.0)
        self.assertAlmostEqual(float(qq.reference_line(0.0)), 5.0)
        np.testing.assert_allclose(qq.reference_line([-z75, z75]), [2.75, 7.25])

    def test_line_estimates_location_and_scale(self):
        z = norm.ppf((np.arange(1, 201) - 0.5) / 200)
        qq = compute_qq(extract_sample(10.0 + 2.0 * z))
        self.assertAlmostEqual(qq.slope, 2.0, delta=1e-3)
        self.assertAlmostEqual(qq.intercept, 10.0, places=6)
        self.assertGreater(qq.correlation, 0.999)

    def test_line_robust_to_outlier(self):
        z = norm.ppf((np.arange(1, 51) - 0.5) / 50)
        clean = compute_qq(extract_sample(z))
        values = z.copy()
        values[-1] = 1000.0
        dirty = compute_qq(extract_sample(values))
        self.assertAlmostEqual(clean.slope, dirty.slope)
        self.assertAlmostEqual(clean.intercept, dirty.intercept)

    def test_degenerate_sample(self):
        qq = compute_qq(extract_sample([2.5, 2.5, 2.5]))
        self.assertEqual(qq.slope, 0.0)
        self.assertEqual(qq.intercept, 2.5)
        self.assertTrue(np.isnan(qq.correlation))

    def test_single_observation(self):
        qq = compute_qq(extract_sample([1.5]))
        np.testing.assert_allclose(qq.theoretical_quantiles, [0.0], atol=1e-12)
        np.testing.assert_array_equal(qq.sample_quantiles, [1.5])


if __name__ == "__main__":
    unittest.main()
