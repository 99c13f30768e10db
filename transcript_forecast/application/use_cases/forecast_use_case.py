"""
Application Use Cases - Forecast

This module contains the forecast orchestrator: it validates a request,
builds the client's series, trains the requested model, scores it and
wraps the point forecasts in confidence intervals.
"""

from dataclasses import replace
from datetime import datetime, timezone
from statistics import NormalDist
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import structlog
from pydantic import ValidationError

from transcript_forecast.application.dtos.prediction_dto import (
    ConfidenceIntervalDTO,
    PredictionPointDTO,
    PredictionRequestDTO,
    PredictionResultDTO,
    TrainedModelDTO,
    ValidationMetricsDTO,
)
from transcript_forecast.application.use_cases.model_validation_use_case import (
    ModelValidationUseCase,
)
from transcript_forecast.application.use_cases.series_builder_use_case import (
    RawRecord,
    SeriesBuilderUseCase,
)
from transcript_forecast.domain.entities.errors import (
    ForecastError,
    InsufficientDataError,
    InvalidRequestError,
)
from transcript_forecast.domain.entities.metrics import ValidationReport
from transcript_forecast.domain.entities.model import ModelOptions
from transcript_forecast.domain.entities.prediction import (
    PredictionRequest,
    ResolvedPredictionRequest,
)
from transcript_forecast.domain.entities.time_series import TimeSeries, format_month
from transcript_forecast.domain.ports.forecasting_model import IModelRegistry
from transcript_forecast.domain.ports.resource_ledger import (
    IResourceLedger,
    IResourceScope,
)
from transcript_forecast.domain.services.data_quality import (
    DataQualityPolicy,
    assess_data_quality,
)
from transcript_forecast.domain.services.request_validator import (
    RequestPolicy,
    validate_prediction_request,
)
from transcript_forecast.shared.cancellation import CancellationToken
from transcript_forecast.shared.consts import MINIMUM_HISTORY_POINTS

logger = structlog.get_logger(__name__)

RequestLike = Union[PredictionRequest, Mapping[str, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_prediction_request(request: RequestLike) -> PredictionRequest:
    """Accept a PredictionRequest or a wire mapping (camelCase or snake_case).

    Raises:
        InvalidRequestError: If a mapping has missing or mistyped fields.
    """
    if isinstance(request, PredictionRequest):
        return request
    if not isinstance(request, Mapping):
        raise InvalidRequestError(
            [f"Request must be a mapping, got {type(request).__name__}."]
        )
    try:
        return PredictionRequestDTO.model_validate(dict(request)).to_entity()
    except ValidationError as exc:
        raise InvalidRequestError(
            [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
        ) from exc


def confidence_bounds(
    estimates: np.ndarray,
    sigma: float,
    confidence_level: float,
    scope: IResourceScope,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Interval bounds for consecutive forecast steps.

    The half-width at step k is ``z * sigma * sqrt(k)``. When the lower bound
    would fall below zero the band is translated up rather than cut, so the
    width never shrinks and the estimate always lies inside the band.
    """
    z = NormalDist().inv_cdf(0.5 + confidence_level / 2.0)
    steps = scope.track(np.arange(1, estimates.size + 1, dtype=np.float64))
    half_width = scope.track(z * sigma * np.sqrt(steps))
    lower = scope.track(np.maximum(estimates - half_width, 0.0))
    upper = scope.track(lower + 2.0 * half_width)
    return lower, upper


class ForecastUseCase:
    """Use case producing a forecast with uncertainty bounds for one client."""

    def __init__(
        self,
        series_builder: SeriesBuilderUseCase,
        validator: ModelValidationUseCase,
        registry: IModelRegistry,
        ledger: IResourceLedger,
        request_policy: Optional[RequestPolicy] = None,
        quality_policy: Optional[DataQualityPolicy] = None,
        model_options: Optional[ModelOptions] = None,
        minimum_history_points: int = MINIMUM_HISTORY_POINTS,
        minimum_uncertainty_ratio: float = 0.05,
        minimum_uncertainty: float = 1.0,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.series_builder = series_builder
        self.validator = validator
        self.registry = registry
        self.ledger = ledger
        self.request_policy = request_policy or RequestPolicy()
        self.quality_policy = quality_policy or DataQualityPolicy()
        self.model_options = model_options or ModelOptions()
        self.minimum_history_points = int(minimum_history_points)
        self.minimum_uncertainty_ratio = float(minimum_uncertainty_ratio)
        self.minimum_uncertainty = float(minimum_uncertainty)
        self.clock = clock

    def generate_predictions(
        self,
        raw_records: Iterable[RawRecord],
        request: RequestLike,
        cancellation: Optional[CancellationToken] = None,
    ) -> PredictionResultDTO:
        """
        Forecast ``request.horizon`` months for one client.

        Args:
            raw_records: Transcript records of any number of clients
            request: PredictionRequest or its wire mapping
            cancellation: Optional token checked between steps

        Returns:
            PredictionResultDTO with one prediction per horizon step

        Raises:
            InvalidRequestError: When the request fails validation
            InvalidRecordError: When a record does not match the contract
            MalformedPeriodError: When a month label cannot be parsed
            InsufficientDataError: When the history is too short
            TrainingFailureError: When the model fit is singular
            ForecastCancelledError: When ``cancellation`` fires
        """
        token = cancellation or CancellationToken()
        resolved, series = self.prepare(raw_records, request, token)
        return self.forecast_series(series, resolved, token)

    def prepare(
        self,
        raw_records: Iterable[RawRecord],
        request: RequestLike,
        cancellation: Optional[CancellationToken] = None,
    ) -> Tuple[ResolvedPredictionRequest, TimeSeries]:
        """Validate the request and build a series long enough to forecast."""

        token = cancellation or CancellationToken()
        try:
            resolved = validate_prediction_request(
                parse_prediction_request(request), self.request_policy
            )
            token.raise_if_cancelled("series")
            series = self.series_builder.build(raw_records, resolved.entity_id)
            if len(series) < self.minimum_history_points:
                raise InsufficientDataError(
                    required=self.minimum_history_points,
                    available=len(series),
                    details={"entity_id": resolved.entity_id},
                )
        except ForecastError as exc:
            logger.warning(
                "forecast.rejected",
                error=type(exc).__name__,
                message=exc.message,
                details=exc.details,
            )
            raise
        return resolved, series

    def forecast_series(
        self,
        series: TimeSeries,
        request: ResolvedPredictionRequest,
        cancellation: Optional[CancellationToken] = None,
    ) -> PredictionResultDTO:
        """Forecast from an already built series; every step runs inside one
        ledger scope so buffers are released on success, error and
        cancellation alike."""

        token = cancellation or CancellationToken()
        log = logger.bind(
            entity_id=series.entity_id, model_type=request.model_type.value
        )
        log.info(
            "forecast.start",
            horizon=request.horizon,
            history_points=len(series),
            confidence_level=request.confidence_level,
        )

        try:
            with self.ledger.scope(f"forecast.{request.model_type.value}") as scope:
                result = self._run(series, request, token, scope)
        except ForecastError as exc:
            log.warning(
                "forecast.failed",
                error=type(exc).__name__,
                message=exc.message,
                details=exc.details,
            )
            raise

        log.info(
            "forecast.completed",
            predictions=len(result.predictions),
            accuracy=result.ranking_metrics.accuracy,
            validation_skipped=result.validation_skipped,
            warnings=len(result.warnings),
        )
        return result

    def _run(
        self,
        series: TimeSeries,
        request: ResolvedPredictionRequest,
        token: CancellationToken,
        scope: IResourceScope,
    ) -> PredictionResultDTO:
        if len(series) < self.minimum_history_points:
            raise InsufficientDataError(
                required=self.minimum_history_points, available=len(series)
            )

        token.raise_if_cancelled("data_quality")
        warnings: List[str] = assess_data_quality(
            series, self.clock().date(), self.quality_policy
        )

        options = replace(
            self.model_options, polynomial_degree=request.polynomial_degree
        )
        model = self.registry.get(request.model_type)

        token.raise_if_cancelled("training")
        trained = model.train(series, options)

        token.raise_if_cancelled("validation")
        report = self.validator.validate(
            series, request.model_type, options, request.validation_split
        )
        warnings.extend(report.warnings)

        token.raise_if_cancelled("prediction")
        forecast = model.predict(trained, series, request.horizon)
        estimates = scope.track(
            np.array([value for _, value in forecast], dtype=np.float64)
        )
        sigma = self._uncertainty(series, report)
        lower, upper = confidence_bounds(
            estimates, sigma, request.confidence_level, scope
        )

        token.raise_if_cancelled("assembly")
        predictions = [
            PredictionPointDTO(
                step=step,
                timestamp=format_month(month),
                predicted_value=float(estimates[step - 1]),
                confidence_interval=ConfidenceIntervalDTO(
                    lower=float(lower[step - 1]), upper=float(upper[step - 1])
                ),
            )
            for step, (month, _) in enumerate(forecast, start=1)
        ]

        return PredictionResultDTO(
            entity_id=series.entity_id,
            model_type=request.model_type.value,
            predictions=predictions,
            training_metrics=ValidationMetricsDTO.from_entity(report.training_metrics),
            validation_metrics=(
                ValidationMetricsDTO.from_entity(report.validation_metrics)
                if report.validation_metrics is not None
                else None
            ),
            cross_validation_score=report.cross_validation_score,
            validation_skipped=report.validation_skipped,
            model=TrainedModelDTO.from_entity(trained),
            confidence_level=request.confidence_level,
            history_points=len(series),
            warnings=warnings,
            created_at=self.clock(),
        )

    def _uncertainty(self, series: TimeSeries, report: ValidationReport) -> float:
        """Residual scale of the forecast, floored so perfect fits on short
        histories still get a usable band."""
        floor = max(
            self.minimum_uncertainty_ratio * float(np.mean(series.values)),
            self.minimum_uncertainty,
        )
        return max(report.ranking_metrics.rmse, floor)
