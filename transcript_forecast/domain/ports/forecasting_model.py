"""Domain port for interchangeable forecasting strategies."""

from __future__ import annotations

from datetime import date
from typing import List, Protocol, Tuple

import numpy as np

from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries


class IForecastingModel(Protocol):
    """Uniform train/predict contract shared by every model type."""

    model_type: ModelType

    def minimum_points(self, options: ModelOptions) -> int:
        """Smallest series length the model can be trained on."""
        ...

    def train(self, series: TimeSeries, options: ModelOptions) -> TrainedModel:
        """Fit the model to ``series``.

        Raises:
            InsufficientDataError: If the series is shorter than the minimum.
            TrainingFailureError: If the fit is singular or ill-conditioned.
        """
        ...

    def predict(
        self, model: TrainedModel, series: TimeSeries, horizon: int
    ) -> List[Tuple[date, float]]:
        """Point estimates for the ``horizon`` months following ``series``."""
        ...

    def in_sample(
        self, model: TrainedModel, series: TimeSeries
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(actual, fitted)`` for the points the model can explain."""
        ...


class IModelRegistry(Protocol):
    """Lookup of the model implementation for each supported type."""

    def get(self, model_type: ModelType) -> IForecastingModel:
        ...

    def supported_types(self) -> Tuple[ModelType, ...]:
        ...
