"""
Shapiro-Wilk normality test computational core.

Royston's approximation (Applied Statistics algorithm AS R94): the weights
come from expected normal order statistics with polynomial corrections for
the extreme values, and the p-value from a normalising transformation of
1 - W whose form differs for n <= 11 and n >= 12.

References
----------
Royston, P. (1992). Approximating the Shapiro-Wilk W-test for non-normality.
Statistics and Computing, 2, 117-119.
Royston, P. (1995). Remark AS R94. Applied Statistics, 44(4), 547-551.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.polynomial import polynomial as P
from scipy.stats import norm

from ..diagnostics.utils import stable_sort
from ..errors import DegenerateSample, InsufficientData, SampleSizeOutOfRange
from .utils import (
    DEFAULT_ALPHA,
    DEGENERATE_RANGE,
    SW_MAX_N,
    SW_MIN_N,
    TestResult,
    TestType,
    clip_probability,
    validate_alpha,
)

LOGGER = logging.getLogger(__name__)

# Polynomial coefficients, lowest order first
_C1 = (0.0, 0.221157, -0.147981, -2.071190, 4.434685, -2.706056)
_C2 = (0.0, 0.042981, -0.293762, -1.752461, 5.682633, -3.582633)
_C3 = (0.5440, -0.39978, 0.025054, -6.714e-4)
_C4 = (1.3822, -0.77857, 0.062767, -0.0020322)
_C5 = (-1.5861, -0.31082, -0.083751, 0.0038915)
_C6 = (-0.4803, -0.082676, 0.0030302)
_G = (-2.273, 0.459)


def shapiro_wilk_coefficients(n: int) -> np.ndarray:
    """
    Return the n antisymmetric Shapiro-Wilk weights for sorted data.

    The weights sum to zero and have unit Euclidean norm. The middle weight of
    an odd-sized sample is zero.
    """
    if n < SW_MIN_N:
        raise InsufficientData(f"Shapiro-Wilk weights need n >= {SW_MIN_N}, got {n}.")

    half = n // 2
    if n == 3:
        upper = np.array([math.sqrt(0.5)])
    else:
        i = np.arange(1, half + 1, dtype=float)
        m = norm.ppf((i - 0.375) / (n + 0.25))
        summ2 = 2.0 * np.sum(m**2)
        ssumm2 = math.sqrt(summ2)
        rsn = 1.0 / math.sqrt(n)

        upper = -m / ssumm2
        upper[0] = P.polyval(rsn, _C1) - m[0] / ssumm2
        if n > 5:
            upper[1] = P.polyval(rsn, _C2) - m[1] / ssumm2
            fac = math.sqrt(
                (summ2 - 2.0 * m[0] ** 2 - 2.0 * m[1] ** 2)
                / (1.0 - 2.0 * upper[0] ** 2 - 2.0 * upper[1] ** 2)
            )
            upper[2:] = -m[2:] / fac
        else:
            fac = math.sqrt((summ2 - 2.0 * m[0] ** 2) / (1.0 - 2.0 * upper[0] ** 2))
            upper[1:] = -m[1:] / fac

    weights = np.zeros(n)
    weights[:half] = -upper
    weights[n - half :] = upper[::-1]
    return weights


def _w_complement(sorted_x: np.ndarray, weights: np.ndarray) -> float:
    """1 - W as one minus the squared correlation, kept separate to avoid cancellation near W = 1."""
    xs = sorted_x / (sorted_x[-1] - sorted_x[0])
    xs = xs - xs.mean()
    a = weights - weights.mean()
    ssa = float(np.dot(a, a))
    ssx = float(np.dot(xs, xs))
    sax = float(np.dot(a, xs))
    ssassx = math.sqrt(ssa * ssx)
    return max((ssassx - sax) * (ssassx + sax) / (ssa * ssx), 0.0)


def shapiro_wilk_p_value(w: float, n: int) -> float:
    """
    Upper-tail p-value for W.

    n == 3 uses the exact distribution; 4 <= n <= 11 and n >= 12 use Royston's
    two separate normalising transformations of 1 - W.
    """
    if n == 3:
        p = (6.0 / math.pi) * (math.asin(math.sqrt(w)) - math.pi / 3.0)
        return clip_probability(p)

    w1 = 1.0 - w
    if w1 <= 0.0:
        return 1.0
    y = math.log(w1)

    if n <= 11:
        gamma = P.polyval(n, _G)
        if y >= gamma:
            return 1e-99
        y = -math.log(gamma - y)
        mu = P.polyval(n, _C3)
        sigma = math.exp(P.polyval(n, _C4))
    else:
        ln_n = math.log(n)
        mu = P.polyval(ln_n, _C5)
        sigma = math.exp(P.polyval(ln_n, _C6))

    return clip_probability(norm.sf(y, loc=mu, scale=sigma))


def run_shapiro_wilk(data: np.ndarray, alpha: float = DEFAULT_ALPHA) -> TestResult:
    """
    Shapiro-Wilk test for normality.

    Parameters
    ----------
    data : np.ndarray
        Sample with 3 <= n <= 5000 finite observations. Not modified.
    alpha : float
        Significance level for the decision (default: 0.05).

    Returns
    -------
    TestResult
        W statistic and its p-value.

    Raises
    ------
    InsufficientData
        If n < 3.
    SampleSizeOutOfRange
        If n > 5000.
    DegenerateSample
        If all observations are equal.
    """
    alpha = validate_alpha(alpha)
    x = np.asarray(data, dtype=float)
    n = int(x.size)

    if n < SW_MIN_N:
        raise InsufficientData(f"Shapiro-Wilk test requires at least {SW_MIN_N} observations, got {n}.")
    if n > SW_MAX_N:
        raise SampleSizeOutOfRange(
            f"Shapiro-Wilk p-values are validated up to n = {SW_MAX_N}, got n = {n}."
        )

    sorted_x = stable_sort(x)
    if sorted_x[-1] - sorted_x[0] < DEGENERATE_RANGE:
        raise DegenerateSample("Sample is constant; Shapiro-Wilk W is undefined.")

    w1 = _w_complement(sorted_x, shapiro_wilk_coefficients(n))
    w = 1.0 - w1
    if n == 3:
        # W cannot fall below 0.75 for n = 3; guard against rounding
        w = max(w, 0.75)
    p_value = shapiro_wilk_p_value(w, n)
    LOGGER.debug(f"Shapiro-Wilk: n={n}, W={w:.6f}, p={p_value:.6g}")

    notes = ()
    if n < 20:
        notes = ("Small sample (n<20): low power against moderate departures.",)

    return TestResult(
        method=TestType.SHAPIRO_WILK.label,
        statistic=float(w),
        p_value=p_value,
        n=n,
        alpha=alpha,
        notes=notes,
    )
