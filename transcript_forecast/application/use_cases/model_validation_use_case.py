"""
Application Use Cases - Model Validation

This module scores a model type against a series: a chronological holdout
split, residual metrics and a rolling-origin cross-validation score.
"""

import math
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import structlog
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.model_selection import TimeSeriesSplit

from transcript_forecast.domain.entities.errors import (
    InsufficientDataError,
    TrainingFailureError,
)
from transcript_forecast.domain.entities.metrics import (
    ValidationMetrics,
    ValidationReport,
)
from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries, month_offset
from transcript_forecast.domain.ports.forecasting_model import (
    IForecastingModel,
    IModelRegistry,
)

logger = structlog.get_logger(__name__)


def calculate_metrics(
    actual: Sequence[float], predicted: Sequence[float]
) -> ValidationMetrics:
    """
    Compare predictions with observed values.

    ``accuracy`` is 100 minus the mean relative error in percent, where the
    error of each point is relative to ``max(actual, 1)`` so zero-count
    months do not divide by zero. It is clamped to [0, 100].
    """
    y_true = np.asarray(actual, dtype=np.float64)
    y_pred = np.asarray(predicted, dtype=np.float64)
    if y_true.size == 0 or y_true.shape != y_pred.shape:
        raise ValueError(
            "Metrics need equally sized, non-empty actual and predicted values"
        )

    mse = float(mean_squared_error(y_true, y_pred))
    mae = float(mean_absolute_error(y_true, y_pred))

    ss_res = float(np.sum((y_true - y_pred) ** 2))
    ss_tot = float(np.sum((y_true - y_true.mean()) ** 2))
    r2 = 1.0 - ss_res / ss_tot if ss_tot > 0.0 else 0.0

    relative_error = np.abs(y_pred - y_true) / np.maximum(y_true, 1.0)
    accuracy = float(np.clip(100.0 - relative_error.mean() * 100.0, 0.0, 100.0))

    return ValidationMetrics(
        mse=mse,
        mae=mae,
        rmse=math.sqrt(mse),
        r2=r2,
        accuracy=accuracy,
    )


def forecast_months(
    model: IForecastingModel,
    trained: TrainedModel,
    history: TimeSeries,
    months: Sequence[date],
) -> List[float]:
    """Forecast the given future months from the end of ``history``."""
    steps = month_offset(history.points[-1].timestamp, months[-1])
    forecast = dict(model.predict(trained, history, steps))
    return [forecast[month] for month in months]


class ModelValidationUseCase:
    """Scores one model type against a series without touching the caller's
    trained parameters."""

    def __init__(
        self,
        registry: IModelRegistry,
        max_cv_folds: int = 5,
        default_options: Optional[ModelOptions] = None,
    ):
        """
        Initialize the validation use case.

        Args:
            registry: Lookup of model implementations
            max_cv_folds: Upper bound on rolling-origin folds
            default_options: Options used when a call does not pass any
        """
        self.registry = registry
        self.max_cv_folds = int(max_cv_folds)
        self.default_options = default_options or ModelOptions()

    def validate(
        self,
        series: TimeSeries,
        model_type: Union[ModelType, str],
        options: Optional[ModelOptions] = None,
        validation_split: float = 0.2,
    ) -> ValidationReport:
        """
        Validate ``model_type`` on ``series``.

        The leading segment trains the model and the trailing
        ``max(1, floor(n * validation_split))`` points score it. When the
        leading segment is too short to train on, validation is skipped and
        the metrics come from an in-sample fit on the full series.

        Raises:
            InsufficientDataError: When even the full series is too short
            TrainingFailureError: When the full-series fallback fit fails
        """
        model_type = ModelType(model_type)
        options = options or self.default_options
        model = self.registry.get(model_type)
        warnings: List[str] = []

        n = len(series)
        n_val = max(1, int(math.floor(n * validation_split)))
        n_train = n - n_val
        minimum = model.minimum_points(options)

        holdout: Optional[Tuple[ValidationMetrics, ValidationMetrics]] = None
        skip_reason: Optional[str] = None

        if n < 2 or n_train < minimum:
            skip_reason = (
                f"{n_train} training points are available after holding out "
                f"{n_val}, the model needs {minimum}"
            )
        else:
            try:
                holdout = self._holdout(model, series, options, n_train)
            except (InsufficientDataError, TrainingFailureError) as exc:
                skip_reason = exc.message

        validation_metrics: Optional[ValidationMetrics] = None
        if holdout is not None:
            training_metrics, validation_metrics = holdout
        else:
            warnings.append(
                f"Validation skipped for the {model_type.value} model: "
                f"{skip_reason}. Metrics are in-sample."
            )
            logger.warning(
                "validation.skipped",
                entity_id=series.entity_id,
                model_type=model_type.value,
                reason=skip_reason,
            )
            trained = model.train(series, options)
            actual, fitted = model.in_sample(trained, series)
            training_metrics = calculate_metrics(actual, fitted)

        cv_score, folds = self._cross_validate(model, series, options, warnings)

        logger.debug(
            "validation.completed",
            entity_id=series.entity_id,
            model_type=model_type.value,
            validation_skipped=holdout is None,
            accuracy=(validation_metrics or training_metrics).accuracy,
            cross_validation_score=cv_score,
            cross_validation_folds=folds,
        )

        return ValidationReport(
            training_metrics=training_metrics,
            validation_metrics=validation_metrics,
            cross_validation_score=cv_score,
            cross_validation_folds=folds,
            validation_skipped=holdout is None,
            warnings=tuple(warnings),
        )

    def _holdout(
        self,
        model: IForecastingModel,
        series: TimeSeries,
        options: ModelOptions,
        n_train: int,
    ) -> Tuple[ValidationMetrics, ValidationMetrics]:
        train_series = series.head(n_train)
        holdout = series.tail(len(series) - n_train)

        trained = model.train(train_series, options)
        actual, fitted = model.in_sample(trained, train_series)
        training_metrics = calculate_metrics(actual, fitted)

        predicted = forecast_months(model, trained, train_series, holdout.timestamps)
        validation_metrics = calculate_metrics(holdout.values, predicted)
        return training_metrics, validation_metrics

    def _cross_validate(
        self,
        model: IForecastingModel,
        series: TimeSeries,
        options: ModelOptions,
        warnings: List[str],
    ) -> Tuple[Optional[float], int]:
        """Mean one-step-ahead accuracy over rolling-origin folds."""

        n = len(series)
        n_splits = min(self.max_cv_folds, n - model.minimum_points(options))
        if n_splits < 2:
            warnings.append(
                "Not enough history for cross-validation; "
                "the cross-validation score is unavailable."
            )
            return None, 0

        splitter = TimeSeriesSplit(n_splits=n_splits, test_size=1)
        scores: List[float] = []
        for train_index, test_index in splitter.split(np.arange(n)):
            history = series.head(len(train_index))
            target = series.points[int(test_index[0])]
            try:
                trained = model.train(history, options)
            except (InsufficientDataError, TrainingFailureError) as exc:
                logger.debug(
                    "validation.fold_failed",
                    entity_id=series.entity_id,
                    model_type=model.model_type.value,
                    train_size=len(history),
                    error=exc.message,
                )
                continue
            predicted = forecast_months(model, trained, history, [target.timestamp])
            scores.append(calculate_metrics([target.value], predicted).accuracy)

        if len(scores) < 2:
            warnings.append(
                f"Only {len(scores)} cross-validation folds could be trained; "
                "the cross-validation score is unavailable."
            )
            return None, len(scores)

        return float(np.mean(scores)), len(scores)
