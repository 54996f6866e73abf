"""Exceptions raised by the normality analysis engine."""

from __future__ import annotations


class NormalityAnalysisError(ValueError):
    """Raised when a sample cannot be analysed for normality."""


class InvalidInputKind(NormalityAnalysisError):
    """Raised when the input is not numeric or holds no usable observations."""


class InsufficientData(NormalityAnalysisError):
    """Raised when a sample has fewer observations than a computation needs."""


class SampleSizeOutOfRange(NormalityAnalysisError):
    """Raised when a sample exceeds the size a test has been validated for."""


class DegenerateSample(NormalityAnalysisError):
    """Raised when all observations are equal and a test is undefined."""
