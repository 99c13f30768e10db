"""Polynomial trend of configurable degree against the month index."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from transcript_forecast.domain.entities.errors import InsufficientDataError
from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries, month_offset
from transcript_forecast.domain.ports.resource_ledger import IResourceScope

from .base import BaseForecastingModel
from .least_squares import solve_least_squares


class PolynomialTrendModel(BaseForecastingModel):
    """Least-squares fit on powers 1..d of the scaled month index.

    The index is divided by the last training index so the regressors stay in
    ``[0, 1]``; the scale is stored on the trained model.
    """

    model_type = ModelType.POLYNOMIAL

    def minimum_points(self, options: ModelOptions) -> int:
        return options.polynomial_degree + 1

    def train(self, series: TimeSeries, options: ModelOptions) -> TrainedModel:
        degree = options.polynomial_degree
        if len(series) <= degree:
            raise InsufficientDataError(
                required=degree + 1,
                available=len(series),
                reason=f"polynomial of degree {degree} is underdetermined",
                details={"degree": degree},
            )
        return super().train(series, options)

    def _fit(
        self, series: TimeSeries, options: ModelOptions, scope: IResourceScope
    ) -> TrainedModel:
        degree = options.polynomial_degree
        indices = series.period_indices()
        index_scale = float(max(indices[-1], 1))

        x = scope.track(np.asarray(indices, dtype=np.float64) / index_scale)
        y = scope.track(np.asarray(series.values, dtype=np.float64))
        design = scope.track(np.vander(x, degree + 1, increasing=True))

        solution = solve_least_squares(
            design,
            y,
            max_condition_number=options.max_condition_number,
            scope=scope,
            label=f"polynomial(degree={degree})",
        )

        return TrainedModel(
            model_type=self.model_type,
            intercept=float(solution[0]),
            coefficients=tuple(float(value) for value in solution[1:]),
            origin=series.origin,
            last_index=indices[-1],
            n_observations=len(series),
            degree=degree,
            index_scale=index_scale,
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
        return self._evaluate(model, future, scope)

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
        return actual, self._evaluate(model, x, scope)

    @staticmethod
    def _evaluate(
        model: TrainedModel, index: np.ndarray, scope: IResourceScope
    ) -> np.ndarray:
        powers = scope.track(
            np.vander(
                index / model.index_scale,
                len(model.coefficients) + 1,
                increasing=True,
            )
        )
        weights = np.asarray((model.intercept,) + model.coefficients, dtype=np.float64)
        return powers @ weights
