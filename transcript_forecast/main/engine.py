"""
Forecast Engine - Main Layer

Public entry point of the package. The engine delegates to the use cases
wired by the container and exposes the resource ledger diagnostic.
"""

from dataclasses import replace
from typing import Iterable, Optional, Union

from transcript_forecast.application.dtos.prediction_dto import (
    ModelComparisonResultDTO,
    PredictionResultDTO,
)
from transcript_forecast.application.use_cases.forecast_use_case import (
    ForecastUseCase,
    RequestLike,
)
from transcript_forecast.application.use_cases.model_comparison_use_case import (
    ModelComparisonUseCase,
)
from transcript_forecast.application.use_cases.model_validation_use_case import (
    ModelValidationUseCase,
)
from transcript_forecast.application.use_cases.series_builder_use_case import (
    RawRecord,
    SeriesBuilderUseCase,
)
from transcript_forecast.domain.entities.metrics import MemoryUsage, ValidationReport
from transcript_forecast.domain.entities.model import ModelOptions, ModelType
from transcript_forecast.domain.entities.time_series import TimeSeries
from transcript_forecast.domain.ports.resource_ledger import IResourceLedger
from transcript_forecast.shared.cancellation import CancellationToken


class ForecastEngine:
    """Facade over the forecasting use cases of one container."""

    def __init__(
        self,
        series_builder: SeriesBuilderUseCase,
        validation_use_case: ModelValidationUseCase,
        forecast_use_case: ForecastUseCase,
        comparison_use_case: ModelComparisonUseCase,
        ledger: IResourceLedger,
        model_options: ModelOptions,
        default_validation_split: float = 0.2,
    ):
        self.series_builder = series_builder
        self.validation_use_case = validation_use_case
        self.forecast_use_case = forecast_use_case
        self.comparison_use_case = comparison_use_case
        self.ledger = ledger
        self.model_options = model_options
        self.default_validation_split = default_validation_split

    def build_series(self, records: Iterable[RawRecord], entity_id: str) -> TimeSeries:
        return self.series_builder.build(records, entity_id)

    def validate(
        self,
        series: TimeSeries,
        model_type: Union[ModelType, str] = ModelType.LINEAR,
        polynomial_degree: Optional[int] = None,
        validation_split: Optional[float] = None,
    ) -> ValidationReport:
        """Score a model type on a series built by :meth:`build_series`."""
        options = self.model_options
        if polynomial_degree is not None:
            options = replace(options, polynomial_degree=polynomial_degree)
        split = (
            self.default_validation_split
            if validation_split is None
            else validation_split
        )
        return self.validation_use_case.validate(series, model_type, options, split)

    def generate_predictions(
        self,
        records: Iterable[RawRecord],
        request: RequestLike,
        cancellation: Optional[CancellationToken] = None,
    ) -> PredictionResultDTO:
        return self.forecast_use_case.generate_predictions(
            records, request, cancellation
        )

    def compare_models(
        self,
        records: Iterable[RawRecord],
        request: RequestLike,
        cancellation: Optional[CancellationToken] = None,
    ) -> ModelComparisonResultDTO:
        return self.comparison_use_case.compare_models(records, request, cancellation)

    def memory_usage(self) -> MemoryUsage:
        """Numeric buffers still held by the ledger; zero between calls."""
        return self.ledger.memory_usage()
