"""
Normality analysis pipeline.

Runs the full prerequisite check that precedes a process-capability study:
histogram with fitted normal density, normal Q-Q plot data, and the
Shapiro-Wilk and Anderson-Darling tests, all computed from one extracted
sample. The result is numeric; rendering it is left to the caller.
"""

from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, TextIO, Tuple

import numpy as np
import pandas as pd

from .diagnostics import (
    DensityCurve,
    DescriptiveSummary,
    HistogramSpec,
    ProcessSample,
    QQResult,
    compute_qq,
    describe_sample,
    extract_sample,
    normal_overlay,
    scott_bins,
)
from .errors import DegenerateSample, InsufficientData, SampleSizeOutOfRange
from .normality_tests import run_ad_test, run_shapiro_wilk
from .normality_tests.utils import (
    DEFAULT_ALPHA,
    DEGENERATE_RANGE,
    SW_MAX_N,
    SW_MIN_N,
    OutputChannel,
    TestResult,
    format_p_value,
    validate_alpha,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLE_NAME = "Sample"


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    sample_name: str
    summary: DescriptiveSummary
    histogram: HistogramSpec
    density: DensityCurve
    qq: QQResult
    shapiro_wilk: TestResult
    anderson_darling: TestResult
    channel: OutputChannel = OutputChannel.SILENT

    @property
    def tests(self) -> Tuple[TestResult, TestResult]:
        return (self.shapiro_wilk, self.anderson_darling)

    @property
    def is_normal(self) -> bool:
        """True when neither test rejects normality at its significance level."""
        return not any(t.rejects_normality for t in self.tests)

    def to_frame(self) -> pd.DataFrame:
        """One row per test, in the column layout of the extension's result tables."""
        return pd.DataFrame(
            [
                {
                    "Characteristic": self.sample_name,
                    "Test Method": t.method,
                    "Sample Size (n)": np.int32(t.n),
                    "Test Statistic": t.statistic,
                    "P-Value": t.p_value,
                    "Statistical Decision": t.decision,
                }
                for t in self.tests
            ]
        )

    def format_report(self) -> str:
        title = f"Normality tests: {self.sample_name}"
        lines = [f"--- {title} ---"]
        lines.append(
            f"  n = {self.summary.n}, mean = {self.summary.mean:.4f}, sigma = {self.summary.sigma:.4f}"
        )
        symbols = {self.shapiro_wilk.method: "W", self.anderson_darling.method: "A²"}
        for t in self.tests:
            lines.append(f"  {t.method}: {symbols[t.method]} = {t.statistic:.4f}, P-value: {format_p_value(t.p_value)}")
            lines.append(f"    Result: {t.decision} (alpha={t.alpha})")
        notes = [note for t in self.tests for note in t.notes]
        if notes:
            lines.append("  Notes:")
            lines.extend(f"    - {note}" for note in notes)
        lines.append("-" * (len(title) + 8))
        return "\n".join(lines)

    def emit(self, stream: Optional[TextIO] = None) -> None:
        """Write the test summary when the console channel is selected."""
        if self.channel is not OutputChannel.CONSOLE:
            return
        print(self.format_report(), file=stream or sys.stdout)


def _validate_sample(x: np.ndarray) -> None:
    """
    Reject samples any computation would fail on, before anything runs.

    The tests bound the pipeline: n must lie in [3, 5000] and the sample must
    not be constant.
    """
    n = int(x.size)
    if n < SW_MIN_N:
        raise InsufficientData(
            f"Normality analysis requires at least {SW_MIN_N} observations, but only {n} available."
        )
    if n > SW_MAX_N:
        raise SampleSizeOutOfRange(
            f"Sample has {n} observations; the Shapiro-Wilk test is validated up to {SW_MAX_N}."
        )
    if np.ptp(x) < DEGENERATE_RANGE:
        raise DegenerateSample(
            f"All {n} observations equal {x[0]}. Normality tests cannot be performed on constant data."
        )


def _histogram_with_overlay(x: np.ndarray, summary: DescriptiveSummary) -> Tuple[HistogramSpec, DensityCurve]:
    histogram = scott_bins(x, summary)
    return histogram, normal_overlay(summary, histogram)


def analyze_normality(
    sample,
    sample_name: Optional[str] = None,
    verbose: bool = False,
    *,
    alpha: float = DEFAULT_ALPHA,
    max_workers: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> AnalysisResult:
    """
    Assess whether a process sample is plausibly normal.

    Parameters
    ----------
    sample : ProcessSample, array-like, pd.Series or pd.DataFrame
        Stable-process measurements, flat or one row per subgroup.
    sample_name : str, optional
        Name of the measured characteristic. Defaults to the ProcessSample
        name, or "Sample".
    verbose : bool
        If True the test summary is also written to ``stream``.
    alpha : float
        Significance level for both test decisions (default: 0.05).
    max_workers : int, optional
        Run the independent computations on a thread pool of this size.
        Sequential when omitted or 1.
    stream : TextIO, optional
        Destination of the verbose summary (default: sys.stdout).

    Returns
    -------
    AnalysisResult

    Raises
    ------
    InvalidInputKind, InsufficientData, SampleSizeOutOfRange, DegenerateSample
        Raised before any computation runs; no partial result is returned.
    """
    if sample_name is None:
        sample_name = sample.name if isinstance(sample, ProcessSample) else DEFAULT_SAMPLE_NAME
    alpha = validate_alpha(alpha)
    channel = OutputChannel.from_verbose(verbose)

    x = extract_sample(sample)
    _validate_sample(x)
    summary = describe_sample(x)
    LOGGER.info(f"Analysing normality of '{sample_name}': n={summary.n}, mean={summary.mean:.6g}, sigma={summary.sigma:.6g}")

    jobs = {
        "histogram": (_histogram_with_overlay, (x, summary)),
        "qq": (compute_qq, (x,)),
        "shapiro_wilk": (run_shapiro_wilk, (x, alpha)),
        "anderson_darling": (run_ad_test, (x, alpha)),
    }

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {key: executor.submit(func, *args) for key, (func, args) in jobs.items()}
            outputs = {key: future.result() for key, future in futures.items()}
    else:
        outputs = {key: func(*args) for key, (func, args) in jobs.items()}

    histogram, density = outputs["histogram"]
    result = AnalysisResult(
        sample_name=sample_name,
        summary=summary,
        histogram=histogram,
        density=density,
        qq=outputs["qq"],
        shapiro_wilk=outputs["shapiro_wilk"],
        anderson_darling=outputs["anderson_darling"],
        channel=channel,
    )
    result.emit(stream)
    return result
