"""
Histogram binning (Scott's rule) and the fitted normal overlay.

The overlay is scaled to expected bin counts, so the histogram and the curve
must be built from the same DescriptiveSummary and HistogramSpec.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.stats import norm

from .sample_core import DescriptiveSummary
from .utils import (
    DEGENERATE_BIN_WIDTH,
    OVERLAY_POINTS,
    OVERLAY_SIGMAS,
    SCOTT_FACTOR,
    readonly,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class HistogramSpec:
    bin_width: float
    bin_count: int
    edges: np.ndarray
    counts: np.ndarray
    degenerate: bool = False


@dataclass(frozen=True, eq=False)
class DensityCurve:
    """Fitted normal density in histogram-count units; a single spike when not applicable."""

    x: np.ndarray
    y: np.ndarray
    scale: float
    applicable: bool = True


def scott_bin_width(sigma: float, n: int) -> float:
    """Scott's rule bin width, h = 3.5 * sigma * n^(-1/3)."""
    return SCOTT_FACTOR * sigma * n ** (-1.0 / 3.0)


def scott_bins(sample: np.ndarray, summary: DescriptiveSummary) -> HistogramSpec:
    """
    Derive bin width, bin count, edges and counts for the sample histogram.

    Parameters
    ----------
    sample : np.ndarray
        Extracted sample.
    summary : DescriptiveSummary
        Summary of the same sample; its sigma and n drive Scott's rule.

    Returns
    -------
    HistogramSpec
        ``bin_count`` is at least 1. When sigma is zero the histogram is a
        single bin of width ``DEGENERATE_BIN_WIDTH`` centred on the value.
    """
    h = scott_bin_width(summary.sigma, summary.n)

    if h > 0:
        bin_width = h
        bin_count = max(1, int(math.ceil(summary.range / h)))
        edges = summary.minimum + bin_width * np.arange(bin_count + 1, dtype=float)
        # ceil() guarantees coverage in exact arithmetic; rounding may not
        edges[-1] = max(edges[-1], summary.maximum)
        degenerate = False
    else:
        bin_width = DEGENERATE_BIN_WIDTH
        bin_count = 1
        half = bin_width / 2.0
        edges = np.array([summary.mean - half, summary.mean + half], dtype=float)
        degenerate = True

    counts, _ = np.histogram(sample, bins=edges)
    LOGGER.debug(f"Scott's rule: h={h:.6g}, bins={bin_count}, degenerate={degenerate}")

    return HistogramSpec(
        bin_width=float(bin_width),
        bin_count=bin_count,
        edges=readonly(edges),
        counts=readonly(counts, dtype=np.int64),
        degenerate=degenerate,
    )


def normal_overlay(summary: DescriptiveSummary, histogram: HistogramSpec) -> DensityCurve:
    """
    Fitted normal density over mean +/- 3 sigma, scaled to histogram counts.

    The density is multiplied by ``bin_width * n`` so it is comparable with
    absolute bar heights. A degenerate sample yields one spike of height n
    at the mean, flagged ``applicable=False``.
    """
    scale = histogram.bin_width * summary.n

    if summary.is_degenerate:
        return DensityCurve(
            x=readonly([summary.mean]),
            y=readonly([float(summary.n)]),
            scale=float(scale),
            applicable=False,
        )

    half_span = OVERLAY_SIGMAS * summary.sigma
    x = np.linspace(summary.mean - half_span, summary.mean + half_span, OVERLAY_POINTS)
    y = norm.pdf(x, loc=summary.mean, scale=summary.sigma) * scale

    return DensityCurve(x=readonly(x), y=readonly(y), scale=float(scale))
