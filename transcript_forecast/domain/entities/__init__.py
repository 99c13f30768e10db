"""
Domain Entities Package

This package contains the core domain entities and business logic.
"""

from .errors import (
    ComparisonFailureError,
    DomainError,
    ForecastCancelledError,
    ForecastError,
    InsufficientDataError,
    InvalidRecordError,
    InvalidRequestError,
    MalformedPeriodError,
    TrainingFailureError,
)
from .metrics import MemoryUsage, ValidationMetrics, ValidationReport
from .model import ModelOptions, ModelType, TrainedModel
from .prediction import PredictionRequest, ResolvedPredictionRequest
from .time_series import (
    TimeSeries,
    TimeSeriesPoint,
    add_months,
    format_month,
    month_offset,
    parse_month,
)

__all__ = [
    "TimeSeries",
    "TimeSeriesPoint",
    "add_months",
    "format_month",
    "month_offset",
    "parse_month",
    "ModelType",
    "ModelOptions",
    "TrainedModel",
    "ValidationMetrics",
    "ValidationReport",
    "MemoryUsage",
    "PredictionRequest",
    "ResolvedPredictionRequest",
    "DomainError",
    "ForecastError",
    "InsufficientDataError",
    "MalformedPeriodError",
    "InvalidRequestError",
    "InvalidRecordError",
    "TrainingFailureError",
    "ComparisonFailureError",
    "ForecastCancelledError",
]
