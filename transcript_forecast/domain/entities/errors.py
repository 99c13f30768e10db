"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ForecastError(DomainError):
    """Base class for failures raised by the forecasting engine."""


class InsufficientDataError(ForecastError):
    """Raised when a series is too short for the engine or a model."""

    def __init__(
        self,
        required: int,
        available: int,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.required = required
        self.available = available
        message = (
            f"Insufficient data: at least {required} historical points are "
            f"required, got {available}"
        )
        if reason:
            message = f"{message} ({reason})"
        payload = {"required": required, "available": available}
        payload.update(details or {})
        super().__init__(message, payload)


class MalformedPeriodError(ForecastError):
    """Raised when a month label cannot be parsed as YYYY-MM."""

    def __init__(self, label: Any, details: Optional[Dict[str, Any]] = None):
        self.label = label
        message = f"Malformed month label {label!r}: expected YYYY-MM"
        payload = {"label": label}
        payload.update(details or {})
        super().__init__(message, payload)


class InvalidRequestError(ForecastError):
    """Raised when a prediction request fails validation."""

    def __init__(self, errors: List[str], details: Optional[Dict[str, Any]] = None):
        self.errors = list(errors)
        payload: Dict[str, Any] = {"errors": self.errors}
        payload.update(details or {})
        super().__init__("Prediction request is invalid.", payload)


class InvalidRecordError(ForecastError):
    """Raised when a raw transcript record does not match the input contract."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class TrainingFailureError(ForecastError):
    """Raised when a model fit is numerically singular or ill-conditioned."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ComparisonFailureError(ForecastError):
    """Raised when every candidate model failed during a comparison."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = dict(failures)
        super().__init__(
            "All candidate models failed to produce a forecast",
            {"failures": self.failures},
        )


class ForecastCancelledError(ForecastError):
    """Raised when a caller cancels a running forecast call."""

    def __init__(self, checkpoint: str, reason: Optional[str] = None):
        self.checkpoint = checkpoint
        self.reason = reason
        message = f"Forecast cancelled at {checkpoint}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"checkpoint": checkpoint, "reason": reason})
