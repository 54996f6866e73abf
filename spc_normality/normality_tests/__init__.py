"""
Normality test computational cores.

This package contains pure Python implementations of the Shapiro-Wilk and
Anderson-Darling normality tests, separated from the analysis pipeline for
better maintainability and testability.
"""

from .anderson_darling_core import run_ad_test
from .shapiro_wilk_core import run_shapiro_wilk
from .utils import OutputChannel, TestResult, TestType, format_p_value

__all__ = ["run_ad_test", "run_shapiro_wilk", "OutputChannel", "TestResult", "TestType", "format_p_value"]
