"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the engine and its callers.
"""

from .prediction_dto import (
    ConfidenceIntervalDTO,
    ModelComparisonEntryDTO,
    ModelComparisonResultDTO,
    PredictionPointDTO,
    PredictionRequestDTO,
    PredictionResultDTO,
    TrainedModelDTO,
    ValidationMetricsDTO,
)
from .record_dto import TranscriptRecordDTO

__all__ = [
    "ConfidenceIntervalDTO",
    "ModelComparisonEntryDTO",
    "ModelComparisonResultDTO",
    "PredictionPointDTO",
    "PredictionRequestDTO",
    "PredictionResultDTO",
    "TrainedModelDTO",
    "TranscriptRecordDTO",
    "ValidationMetricsDTO",
]
