"""
Visual-diagnostic computations for the normality check.

Key Components:
---------------
- sample_core: sample extraction and descriptive statistics
- histogram_core: Scott's rule binning and the fitted normal overlay
- qq_core: order statistics, theoretical quantiles and the reference line

The functions return plain numeric results; drawing them is left to the caller.
"""

from .sample_core import (
    DescriptiveSummary,
    ProcessSample,
    describe_sample,
    extract_sample,
    read_sample_csv,
)
from .histogram_core import DensityCurve, HistogramSpec, normal_overlay, scott_bins
from .qq_core import QQResult, compute_qq

__all__ = [
    # Sample
    "ProcessSample",
    "DescriptiveSummary",
    "extract_sample",
    "read_sample_csv",
    "describe_sample",
    # Histogram
    "HistogramSpec",
    "DensityCurve",
    "scott_bins",
    "normal_overlay",
    # Q-Q
    "QQResult",
    "compute_qq",
]
