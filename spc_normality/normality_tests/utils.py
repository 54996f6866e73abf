"""
Utility functions and parameters for normality tests.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import pandas as pd

DEFAULT_ALPHA = 0.05

# Royston's approximation is validated for 3 <= n <= 5000
SW_MIN_N = 3
SW_MAX_N = 5000

AD_MIN_N = 3
AD_RECOMMENDED_N = 7
AD_LARGE_N = 5000

# samples whose range falls below this are treated as constant
DEGENERATE_RANGE = 1e-19

REJECT = "Reject normality"
DO_NOT_REJECT = "Do not reject normality"


# Test type enumeration
class TestType(Enum):
    __test__ = False

    SHAPIRO_WILK = (
        "Shapiro-Wilk",
        "Correlation between the ordered sample and expected normal order statistics. Most powerful for small samples.",
    )
    ANDERSON_DARLING = (
        "Anderson-Darling",
        "Sensitive to deviations in the center and tails of the distribution.",
    )

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]


class OutputChannel(Enum):
    SILENT = ("Silent", "Results are returned only.")
    CONSOLE = ("Console", "Results are returned and the test summary is written to a text stream.")

    @classmethod
    def from_verbose(cls, verbose: bool) -> "OutputChannel":
        return cls.CONSOLE if verbose else cls.SILENT


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    method: str
    statistic: float
    p_value: float
    n: int
    alpha: float = DEFAULT_ALPHA
    adjusted_statistic: Optional[float] = None
    notes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def decision(self) -> str:
        return decide(self.p_value, self.alpha)

    @property
    def rejects_normality(self) -> bool:
        return self.p_value <= self.alpha


def validate_alpha(alpha: float) -> float:
    """Return alpha as float; raise ValueError unless 0 < alpha < 1."""
    alpha = float(alpha)
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"Significance level must lie strictly between 0 and 1, got {alpha}.")
    return alpha


def decide(p_value: float, alpha: float) -> str:
    return REJECT if p_value <= alpha else DO_NOT_REJECT


def clip_probability(p: float) -> float:
    return float(min(max(p, 0.0), 1.0))


def format_p_value(p):
    """
    Format p-value to avoid scientific notation (e.g., E-22) in output.

    Example:
        >>> format_p_value(0.0456)
        '0.0456'
        >>> format_p_value(1.23e-22)
        '< 0.001'
        >>> format_p_value(None)
        '?'
    """
    if p is None or pd.isna(p):
        return "?"
    if p < 0.001:
        return "< 0.001"
    return f"{p:.4f}"
