"""
Application DTOs - Prediction

Data Transfer Objects for forecast requests and the structured results
produced by the forecast and comparison use cases.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from transcript_forecast.domain.entities.metrics import ValidationMetrics
from transcript_forecast.domain.entities.model import TrainedModel
from transcript_forecast.domain.entities.prediction import PredictionRequest
from transcript_forecast.domain.entities.time_series import format_month


class PredictionRequestDTO(BaseModel):
    """Wire form of a forecast request.

    Only types are checked here; ranges and enum membership are checked by
    the domain request validator so that they surface as domain errors.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    entity_id: str = Field(alias="entityId")
    horizon: int
    model_type: str = Field(default="linear", alias="modelType")
    polynomial_degree: Optional[int] = Field(default=None, alias="polynomialDegree")
    validation_split: Optional[float] = Field(default=None, alias="validationSplit")
    confidence_level: Optional[float] = Field(default=None, alias="confidenceLevel")

    def to_entity(self) -> PredictionRequest:
        return PredictionRequest(
            entity_id=self.entity_id,
            horizon=self.horizon,
            model_type=self.model_type,
            polynomial_degree=self.polynomial_degree,
            validation_split=self.validation_split,
            confidence_level=self.confidence_level,
        )


class ConfidenceIntervalDTO(BaseModel):
    lower: float = Field(ge=0.0)
    upper: float


class PredictionPointDTO(BaseModel):
    """A forecast for one future month."""

    step: int = Field(ge=1, description="Relative step of the forecast (1-indexed)")
    timestamp: str = Field(description="Forecast month formatted as YYYY-MM")
    predicted_value: float = Field(ge=0.0)
    confidence_interval: ConfidenceIntervalDTO

    @model_validator(mode="after")
    def _check_interval(self) -> "PredictionPointDTO":
        interval = self.confidence_interval
        if not interval.lower <= self.predicted_value <= interval.upper:
            raise ValueError(
                "Confidence interval must contain the predicted value "
                f"({interval.lower} <= {self.predicted_value} <= {interval.upper})"
            )
        return self


class ValidationMetricsDTO(BaseModel):
    mse: float
    mae: float
    rmse: float
    r2: float
    accuracy: float = Field(ge=0.0, le=100.0)

    @classmethod
    def from_entity(cls, metrics: ValidationMetrics) -> "ValidationMetricsDTO":
        return cls(
            mse=metrics.mse,
            mae=metrics.mae,
            rmse=metrics.rmse,
            r2=metrics.r2,
            accuracy=metrics.accuracy,
        )


class TrainedModelDTO(BaseModel):
    """Parameters of the model that produced the forecast."""

    model_config = ConfigDict(protected_namespaces=())

    model_type: str
    intercept: float
    coefficients: List[float]
    degree: Optional[int] = None
    order: Optional[int] = None
    index_scale: float = 1.0
    origin: str
    n_observations: int

    @classmethod
    def from_entity(cls, model: TrainedModel) -> "TrainedModelDTO":
        return cls(
            model_type=model.model_type.value,
            intercept=model.intercept,
            coefficients=list(model.coefficients),
            degree=model.degree,
            order=model.order,
            index_scale=model.index_scale,
            origin=format_month(model.origin),
            n_observations=model.n_observations,
        )


class PredictionResultDTO(BaseModel):
    """Result of one forecast call."""

    model_config = ConfigDict(protected_namespaces=())

    entity_id: str
    model_type: str
    predictions: List[PredictionPointDTO]
    training_metrics: ValidationMetricsDTO
    validation_metrics: Optional[ValidationMetricsDTO] = None
    cross_validation_score: Optional[float] = None
    validation_skipped: bool = False
    model: TrainedModelDTO
    confidence_level: float
    history_points: int
    warnings: List[str] = Field(default_factory=list)
    created_at: datetime

    @property
    def ranking_metrics(self) -> ValidationMetricsDTO:
        """Validation metrics, or training metrics when validation was skipped."""
        return self.validation_metrics or self.training_metrics


class ModelComparisonEntryDTO(BaseModel):
    result: PredictionResultDTO
    metrics: ValidationMetricsDTO


class ModelComparisonResultDTO(BaseModel):
    """Result of running every model type against the same history."""

    entity_id: str
    best_model: str
    ranking: List[str]
    per_model: Dict[str, ModelComparisonEntryDTO]
    failures: Dict[str, str] = Field(default_factory=dict)
    partial_failure: bool = False
    recommendation: str
    created_at: datetime
