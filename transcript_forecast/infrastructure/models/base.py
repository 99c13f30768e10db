"""Common behaviour for the forecasting model implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Tuple

import numpy as np
import structlog

from transcript_forecast.domain.entities.errors import InsufficientDataError
from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries, add_months
from transcript_forecast.domain.ports.resource_ledger import (
    IResourceLedger,
    IResourceScope,
)

logger = structlog.get_logger(__name__)


class BaseForecastingModel(ABC):
    """Template for models: argument checks and resource scoping live here,
    the numeric work lives in the ``_fit``/``_forecast``/``_fitted`` hooks."""

    model_type: ModelType

    def __init__(self, ledger: IResourceLedger):
        self._ledger = ledger

    @abstractmethod
    def minimum_points(self, options: ModelOptions) -> int:
        ...

    @abstractmethod
    def _fit(
        self, series: TimeSeries, options: ModelOptions, scope: IResourceScope
    ) -> TrainedModel:
        ...

    @abstractmethod
    def _forecast(
        self,
        model: TrainedModel,
        series: TimeSeries,
        horizon: int,
        scope: IResourceScope,
    ) -> np.ndarray:
        ...

    @abstractmethod
    def _fitted(
        self, model: TrainedModel, series: TimeSeries, scope: IResourceScope
    ) -> Tuple[np.ndarray, np.ndarray]:
        ...

    def train(self, series: TimeSeries, options: ModelOptions) -> TrainedModel:
        required = self.minimum_points(options)
        if len(series) < required:
            raise InsufficientDataError(
                required=required,
                available=len(series),
                reason=f"{self.model_type.value} model",
            )

        with self._ledger.scope(f"{self.model_type.value}.train") as scope:
            model = self._fit(series, options, scope)

        logger.debug(
            "model.trained",
            model_type=self.model_type.value,
            entity_id=series.entity_id,
            observations=model.n_observations,
            intercept=model.intercept,
            coefficients=list(model.coefficients),
        )
        return model

    def predict(
        self, model: TrainedModel, series: TimeSeries, horizon: int
    ) -> List[Tuple[date, float]]:
        self._check_model(model)
        if horizon < 1:
            raise ValueError("Horizon must be at least 1")
        if not series.points:
            raise ValueError("Cannot forecast from an empty series")

        with self._ledger.scope(f"{self.model_type.value}.predict") as scope:
            estimates = self._forecast(model, series, horizon, scope)
            last_month = series.points[-1].timestamp
            return [
                (add_months(last_month, step), max(0.0, float(value)))
                for step, value in enumerate(estimates, start=1)
            ]

    def in_sample(
        self, model: TrainedModel, series: TimeSeries
    ) -> Tuple[np.ndarray, np.ndarray]:
        self._check_model(model)
        with self._ledger.scope(f"{self.model_type.value}.in_sample") as scope:
            actual, fitted = self._fitted(model, series, scope)
            return actual.copy(), np.maximum(fitted, 0.0)

    def _check_model(self, model: TrainedModel) -> None:
        if model.model_type is not self.model_type:
            raise ValueError(
                f"{self.model_type.value} model cannot use parameters trained "
                f"for {model.model_type.value}"
            )
