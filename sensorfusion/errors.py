from __future__ import annotations


class PredictorError(Exception):
    """Base class for every error raised by the prediction pipeline."""


class InvalidInput(PredictorError, ValueError):
    """Unknown channel or non-numeric value at ingestion."""


class InsufficientData(PredictorError):
    """Not enough merged samples to build a window."""

    def __init__(self, message: str = "Not enough samples") -> None:
        super().__init__(message)


class ExtractionFailure(PredictorError):
    """The extraction engine returned an unusable result."""


class ClassificationFailure(PredictorError):
    """The scoring function returned an unusable result."""
