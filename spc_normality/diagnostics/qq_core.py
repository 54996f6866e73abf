"""
Normal quantile-quantile computation.

Plotting positions follow Hazen, p_i = (i - 0.5) / n. Theoretical quantiles
are standard-normal z-values, so the reference line slope estimates sigma and
its intercept estimates the mean. The line passes through the sample
quartiles plotted against the matching normal quartiles, which keeps it
insensitive to outlying points in the tails.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import norm
from statsmodels.graphics.gofplots import ProbPlot

from .utils import PLOTTING_POSITION_OFFSET, QQ_LINE_PROBS, readonly


@dataclass(frozen=True, eq=False)
class QQResult:
    sample_quantiles: np.ndarray
    theoretical_quantiles: np.ndarray
    order: np.ndarray
    slope: float
    intercept: float
    correlation: float

    def reference_line(self, x) -> np.ndarray:
        """Evaluate the reference line at theoretical quantile(s) ``x``."""
        return self.intercept + self.slope * np.asarray(x, dtype=float)


def quartile_line(sorted_sample: np.ndarray, probs=QQ_LINE_PROBS):
    """Return (slope, intercept) of the line through a matching quantile pair."""
    y1, y2 = np.quantile(sorted_sample, probs, method="hazen")
    x1, x2 = norm.ppf(probs)
    slope = (y2 - y1) / (x2 - x1)
    intercept = y1 - slope * x1
    return float(slope), float(intercept)


def compute_qq(sample: np.ndarray) -> QQResult:
    """
    Compute order statistics, theoretical normal quantiles and the reference line.

    Parameters
    ----------
    sample : np.ndarray
        Extracted sample. It is not modified; sorting works on a copy.

    Returns
    -------
    QQResult
        ``order`` holds the stable argsort of the sample, so equal values keep
        their original order and ``sample[order] == sample_quantiles``.
    """
    order = np.argsort(sample, kind="mergesort")
    sorted_sample = sample[order]

    probplot = ProbPlot(sorted_sample, dist=norm, fit=False, a=PLOTTING_POSITION_OFFSET)
    theoretical = np.asarray(probplot.theoretical_quantiles, dtype=float)

    slope, intercept = quartile_line(sorted_sample)

    if sorted_sample.size > 1 and sorted_sample[-1] > sorted_sample[0]:
        correlation = float(np.corrcoef(theoretical, sorted_sample)[0, 1])
    else:
        correlation = float("nan")

    return QQResult(
        sample_quantiles=readonly(sorted_sample),
        theoretical_quantiles=readonly(theoretical),
        order=readonly(order, dtype=np.intp),
        slope=slope,
        intercept=intercept,
        correlation=correlation,
    )
