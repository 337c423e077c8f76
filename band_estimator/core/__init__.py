"""
Core Package - IELTS Band Estimator
band_estimator/core/__init__.py

Core infrastructure: dependencies, exceptions.
"""

from band_estimator.core.exceptions import (
    InputRejected,
    OutOfRangeError,
    ResponseParseError,
    ScoringException,
)

__all__ = [
    "InputRejected",
    "OutOfRangeError",
    "ResponseParseError",
    "ScoringException",
]
