"""
Normality check for process-capability studies.

This module exposes the analysis entry point and the result types it returns.
"""

from .diagnostics import ProcessSample
from .errors import (
    DegenerateSample,
    InsufficientData,
    InvalidInputKind,
    NormalityAnalysisError,
    SampleSizeOutOfRange,
)
from .normality_analysis import AnalysisResult, analyze_normality
from .normality_tests import OutputChannel, TestResult, TestType

__all__ = [
    "analyze_normality",
    "AnalysisResult",
    "ProcessSample",
    "OutputChannel",
    "TestResult",
    "TestType",
    "NormalityAnalysisError",
    "InvalidInputKind",
    "InsufficientData",
    "SampleSizeOutOfRange",
    "DegenerateSample",
]
