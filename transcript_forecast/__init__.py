"""
Transcript volume forecasting engine.

Turns a client's monthly transcript counts into forecasts with confidence
intervals, validates model quality and compares the supported model types.

Typical use::

    from transcript_forecast import PredictionRequest, create_engine

    engine = create_engine()
    result = engine.generate_predictions(
        records, PredictionRequest(entity_id="Acme", horizon=3)
    )
"""

from transcript_forecast.application.dtos import (
    ModelComparisonResultDTO,
    PredictionResultDTO,
    TranscriptRecordDTO,
)
from transcript_forecast.domain.entities import (
    ComparisonFailureError,
    DomainError,
    ForecastCancelledError,
    ForecastError,
    InsufficientDataError,
    InvalidRecordError,
    InvalidRequestError,
    MalformedPeriodError,
    ModelType,
    PredictionRequest,
    TimeSeries,
    TrainingFailureError,
)
from transcript_forecast.main import AppSettings, ForecastEngine, create_engine
from transcript_forecast.shared import CancellationToken

__version__ = "1.0.0"

__all__ = [
    "AppSettings",
    "CancellationToken",
    "ComparisonFailureError",
    "DomainError",
    "ForecastCancelledError",
    "ForecastEngine",
    "ForecastError",
    "InsufficientDataError",
    "InvalidRecordError",
    "InvalidRequestError",
    "MalformedPeriodError",
    "ModelComparisonResultDTO",
    "ModelType",
    "PredictionRequest",
    "PredictionResultDTO",
    "TimeSeries",
    "TrainingFailureError",
    "TranscriptRecordDTO",
    "create_engine",
]
