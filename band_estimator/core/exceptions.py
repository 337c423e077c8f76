"""
Custom Exceptions - IELTS Band Estimator
band_estimator/core/exceptions.py

Custom exception classes for the scoring pipeline. Only InputRejected ever
escapes ScoringPipeline.score(); everything else is recovered internally.
"""


class ScoringException(Exception):
    """Base exception for scoring operations."""

    pass


class InputRejected(ScoringException):
    """Submission rejected before any scoring was attempted."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class OutOfRangeError(InputRejected):
    """Word count outside the accepted window."""

    def __init__(self, actual: int, minimum: int, maximum: int):
        self.actual = actual
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"essay must be {minimum}-{maximum} words (got {actual})"
        )


class ResponseParseError(ScoringException):
    """Model output could not be decoded into a score record."""

    def __init__(self, message: str = "Model response could not be parsed"):
        self.message = message
        super().__init__(message)
