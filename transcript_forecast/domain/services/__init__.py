"""Domain services package."""

from .data_quality import DataQualityPolicy, assess_data_quality, count_outliers
from .request_validator import RequestPolicy, validate_prediction_request

__all__ = [
    "DataQualityPolicy",
    "RequestPolicy",
    "assess_data_quality",
    "count_outliers",
    "validate_prediction_request",
]
