"""
Use Cases Package - Application Layer

This package contains the use cases of the forecasting engine. Use cases
orchestrate the flow of data between the caller, the domain services and
the numeric models.
"""

from .forecast_use_case import ForecastUseCase, confidence_bounds
from .model_comparison_use_case import ModelComparisonUseCase
from .model_validation_use_case import ModelValidationUseCase, calculate_metrics
from .series_builder_use_case import SeriesBuilderUseCase

__all__ = [
    "ForecastUseCase",
    "ModelComparisonUseCase",
    "ModelValidationUseCase",
    "SeriesBuilderUseCase",
    "calculate_metrics",
    "confidence_bounds",
]
