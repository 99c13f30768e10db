"""
Application Use Cases - Model Comparison

This module runs the forecast orchestrator once per model type on the same
history, ranks the outcomes and explains which model to use.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from transcript_forecast.application.dtos.prediction_dto import (
    ModelComparisonEntryDTO,
    ModelComparisonResultDTO,
    PredictionResultDTO,
)
from transcript_forecast.application.use_cases.forecast_use_case import (
    ForecastUseCase,
    RequestLike,
)
from transcript_forecast.application.use_cases.series_builder_use_case import (
    RawRecord,
)
from transcript_forecast.domain.entities.errors import (
    ComparisonFailureError,
    InsufficientDataError,
    TrainingFailureError,
)
from transcript_forecast.domain.entities.model import ModelType
from transcript_forecast.shared.cancellation import CancellationToken

logger = structlog.get_logger(__name__)

COMPARISON_ORDER = (ModelType.LINEAR, ModelType.POLYNOMIAL, ModelType.AUTOREGRESSIVE)


class ModelComparisonUseCase:
    """Use case comparing every supported model type for one client."""

    def __init__(
        self,
        forecast_use_case: ForecastUseCase,
        model_types: Sequence[ModelType] = COMPARISON_ORDER,
        near_tie_accuracy_gap: float = 5.0,
        low_history_threshold: int = 20,
    ):
        self.forecast_use_case = forecast_use_case
        self.model_types = tuple(ModelType(item) for item in model_types)
        self.near_tie_accuracy_gap = float(near_tie_accuracy_gap)
        self.low_history_threshold = int(low_history_threshold)

    def compare_models(
        self,
        raw_records: Iterable[RawRecord],
        base_request: RequestLike,
        cancellation: Optional[CancellationToken] = None,
    ) -> ModelComparisonResultDTO:
        """
        Forecast with each model type and rank the results.

        The request is validated and the series built once, so request and
        data errors are raised directly instead of being recorded per model.
        The base request's model type is ignored.

        Raises:
            ComparisonFailureError: When every model type failed
            ForecastCancelledError: When ``cancellation`` fires
        """
        token = cancellation or CancellationToken()
        resolved, series = self.forecast_use_case.prepare(
            raw_records, base_request, token
        )
        log = logger.bind(entity_id=series.entity_id)
        log.info(
            "comparison.start",
            history_points=len(series),
            model_types=[item.value for item in self.model_types],
        )

        results: Dict[str, PredictionResultDTO] = {}
        failures: Dict[str, str] = {}
        for model_type in self.model_types:
            token.raise_if_cancelled(f"comparison.{model_type.value}")
            try:
                results[model_type.value] = self.forecast_use_case.forecast_series(
                    series, replace(resolved, model_type=model_type), token
                )
            except (InsufficientDataError, TrainingFailureError) as exc:
                failures[model_type.value] = exc.message
                log.warning(
                    "comparison.model_failed",
                    model_type=model_type.value,
                    error=type(exc).__name__,
                    message=exc.message,
                )

        if not results:
            log.error("comparison.failed", failures=failures)
            raise ComparisonFailureError(failures)

        ranking = self._rank(results)
        best = ranking[0]
        recommendation = self._recommend(ranking, results, len(series))

        log.info(
            "comparison.completed",
            best_model=best,
            ranking=ranking,
            failed_models=sorted(failures),
        )

        return ModelComparisonResultDTO(
            entity_id=series.entity_id,
            best_model=best,
            ranking=ranking,
            per_model={
                name: ModelComparisonEntryDTO(
                    result=results[name], metrics=results[name].ranking_metrics
                )
                for name in ranking
            },
            failures=failures,
            partial_failure=bool(failures),
            recommendation=recommendation,
            created_at=self.forecast_use_case.clock(),
        )

    def _rank(self, results: Dict[str, PredictionResultDTO]) -> List[str]:
        """
        Models scored on a holdout come first, by holdout accuracy and then
        RMSE. Models whose validation was skipped follow, ranked the same way
        on their in-sample metrics. Ties keep the comparison order.
        """
        order = [item.value for item in self.model_types]
        return sorted(
            results,
            key=lambda name: (
                results[name].validation_metrics is None,
                -results[name].ranking_metrics.accuracy,
                results[name].ranking_metrics.rmse,
                order.index(name),
            ),
        )

    def _recommend(
        self,
        ranking: List[str],
        results: Dict[str, PredictionResultDTO],
        history_points: int,
    ) -> str:
        best = ranking[0]
        best_validated = results[best].validation_metrics is not None
        best_accuracy = results[best].ranking_metrics.accuracy
        if best_validated:
            sentences = [
                f"The {best} model is recommended with "
                f"{best_accuracy:.1f}% accuracy."
            ]
        else:
            sentences = [
                f"The {best} model is recommended with "
                f"{best_accuracy:.1f}% in-sample accuracy; no model could be "
                "validated on held-out months, so this figure is optimistic."
            ]

        if len(ranking) > 1:
            runner_up = ranking[1]
            runner_up_validated = results[runner_up].validation_metrics is not None
            runner_up_accuracy = results[runner_up].ranking_metrics.accuracy
            if (
                runner_up_validated == best_validated
                and best_accuracy - runner_up_accuracy <= self.near_tie_accuracy_gap
            ):
                sentences.append(
                    f"The {runner_up} model performs similarly "
                    f"({runner_up_accuracy:.1f}% accuracy) and is a reasonable "
                    "alternative."
                )

        if history_points < self.low_history_threshold:
            sentences.append(
                f"Only {history_points} months of history are available; "
                "consider collecting more history for more reliable predictions."
            )

        return " ".join(sentences)
