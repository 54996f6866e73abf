"""
Sample extraction and descriptive statistics.

The upstream control-chart step hands over its stable-process measurements as
a labelled numeric matrix: one row per subgroup, one column per repeated
measurement. This module flattens that matrix into the single ordered sample
every downstream computation reads, and summarises it.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import InsufficientData, InvalidInputKind
from .utils import readonly

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessSample:
    """Measurements of one quality characteristic from a stable process."""

    name: str
    data: Any


@dataclass(frozen=True)
class DescriptiveSummary:
    n: int
    mean: float
    sigma: float
    minimum: float
    maximum: float

    @property
    def range(self) -> float:
        return self.maximum - self.minimum

    @property
    def is_degenerate(self) -> bool:
        """True when every observation is equal (sigma == 0)."""
        return self.sigma == 0.0


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _flatten_values(data, out: List[float]) -> None:
    """Append the scalar values of a nested structure to ``out`` in row-major order."""
    if isinstance(data, pd.DataFrame):
        data = data.to_numpy(dtype=object)
    elif isinstance(data, pd.Series):
        data = data.to_numpy(dtype=object)

    if isinstance(data, np.ndarray):
        if data.dtype.kind in "iuf":
            out.extend(data.astype(float).ravel().tolist())
            return
        if data.dtype.kind != "O":
            raise InvalidInputKind(f"Array of dtype '{data.dtype}' is not numeric.")
        data = data.tolist()

    for item in data:
        if isinstance(item, (list, tuple, np.ndarray, pd.Series)):
            _flatten_values(item, out)
        elif _is_missing(item):
            out.append(np.nan)
        elif isinstance(item, (bool, np.bool_)):
            raise InvalidInputKind(f"Boolean value {item!r} is not a numeric measurement.")
        elif isinstance(item, numbers.Real):
            out.append(float(item))
        else:
            raise InvalidInputKind(f"Value {item!r} of type {type(item).__name__} is not numeric.")


def extract_sample(data) -> np.ndarray:
    """
    Flatten subgroup measurements into a single ordered sample.

    Parameters
    ----------
    data : ProcessSample, array-like, pd.Series or pd.DataFrame
        A flat sequence of measurements or a rectangular / ragged matrix with
        one row per subgroup.

    Returns
    -------
    np.ndarray
        Read-only 1-D float array of the finite observations, rows first and
        columns in their original order. Missing and non-finite entries are
        dropped.

    Raises
    ------
    InvalidInputKind
        If the input is not a numeric structure or nothing remains after the
        missing values are dropped.
    """
    if isinstance(data, ProcessSample):
        data = data.data
    if data is None or isinstance(data, (str, bytes, dict)) or np.isscalar(data):
        raise InvalidInputKind(
            f"Expected a sequence or matrix of measurements, got {type(data).__name__}."
        )

    values: List[float] = []
    try:
        _flatten_values(data, values)
    except TypeError as e:
        raise InvalidInputKind(f"Input of type {type(data).__name__} is not a numeric structure: {e}") from e

    x = np.asarray(values, dtype=float)
    mask = np.isfinite(x)
    n_dropped = int(x.size - mask.sum())
    if n_dropped:
        LOGGER.warning(f"Dropped {n_dropped} missing or non-finite values.")

    x = x[mask]
    if x.size == 0:
        raise InvalidInputKind("No valid observations after removing missing/non-finite values.")
    return readonly(x)


def read_sample_csv(path, columns: Optional[Sequence[str]] = None) -> np.ndarray:
    """
    Load subgroup measurements from a CSV file.

    Each row is a subgroup and each selected column a repeated measurement.
    When ``columns`` is omitted every numeric column is used.
    """
    df = pd.read_csv(path)
    if columns is None:
        df = df.select_dtypes(include="number")
    else:
        missing_cols = [c for c in columns if c not in df.columns]
        if missing_cols:
            raise InvalidInputKind(f"Columns not found in data: {', '.join(missing_cols)}")
        df = df[list(columns)]
    if df.shape[1] == 0:
        raise InvalidInputKind(f"No numeric columns found in '{path}'.")
    return extract_sample(df)


def describe_sample(sample: np.ndarray) -> DescriptiveSummary:
    """Return count, mean and Bessel-corrected standard deviation of the sample."""
    n = int(sample.size)
    if n < 2:
        raise InsufficientData(
            f"At least 2 observations are required to estimate sigma, but only {n} available."
        )

    minimum = float(np.min(sample))
    maximum = float(np.max(sample))
    mean = float(np.mean(sample))
    if maximum == minimum:
        # exact zero so the degenerate branches trigger without rounding noise
        mean, sigma = minimum, 0.0
    else:
        sigma = float(np.std(sample, ddof=1))

    return DescriptiveSummary(n=n, mean=mean, sigma=sigma, minimum=minimum, maximum=maximum)
