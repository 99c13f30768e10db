"""Ordinary least-squares trend against the month index."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from transcript_forecast.domain.entities.errors import TrainingFailureError
from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries, month_offset
from transcript_forecast.domain.ports.resource_ledger import IResourceScope

from .base import BaseForecastingModel


class LinearTrendModel(BaseForecastingModel):
    """``value = intercept + slope * index`` with closed-form coefficients."""

    model_type = ModelType.LINEAR

    def minimum_points(self, options: ModelOptions) -> int:
        return 2

    def _fit(
        self, series: TimeSeries, options: ModelOptions, scope: IResourceScope
    ) -> TrainedModel:
        x = scope.track(np.asarray(series.period_indices(), dtype=np.float64))
        y = scope.track(np.asarray(series.values, dtype=np.float64))

        x_mean = float(np.mean(x))
        y_mean = float(np.mean(y))
        x_centered = scope.track(x - x_mean)
        sxx = float(np.dot(x_centered, x_centered))
        if sxx == 0.0:
            raise TrainingFailureError(
                "linear: period index has zero variance",
                details={"observations": len(series)},
            )

        slope = float(np.dot(x_centered, y - y_mean)) / sxx
        intercept = y_mean - slope * x_mean
        if not (np.isfinite(slope) and np.isfinite(intercept)):
            raise TrainingFailureError("linear: fit produced non-finite coefficients")

        return TrainedModel(
            model_type=self.model_type,
            intercept=intercept,
            coefficients=(slope,),
            origin=series.origin,
            last_index=int(x[-1]),
            n_observations=len(series),
            degree=1,
        )

    def _forecast(
        self,
        model: TrainedModel,
        series: TimeSeries,
        horizon: int,
        scope: IResourceScope,
    ) -> np.ndarray:
        start = month_offset(model.origin, series.points[-1].timestamp)
        future = scope.track(
            np.arange(start + 1, start + horizon + 1, dtype=np.float64)
        )
        return self._evaluate(model, future)

    def _fitted(
        self, model: TrainedModel, series: TimeSeries, scope: IResourceScope
    ) -> Tuple[np.ndarray, np.ndarray]:
        x = scope.track(
            np.asarray(
                [month_offset(model.origin, point.timestamp) for point in series],
                dtype=np.float64,
            )
        )
        actual = scope.track(np.asarray(series.values, dtype=np.float64))
        return actual, self._evaluate(model, x)

    @staticmethod
    def _evaluate(model: TrainedModel, x: np.ndarray) -> np.ndarray:
        return model.intercept + model.coefficients[0] * x
