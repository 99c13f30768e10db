"""Autoregressive model fitted by least squares on lagged values."""

from __future__ import annotations

import math
from typing import Dict, List, Tuple

import numpy as np
import structlog

from transcript_forecast.domain.entities.errors import (
    InsufficientDataError,
    TrainingFailureError,
)
from transcript_forecast.domain.entities.model import (
    ModelOptions,
    ModelType,
    TrainedModel,
)
from transcript_forecast.domain.entities.time_series import TimeSeries
from transcript_forecast.domain.ports.resource_ledger import IResourceScope

from .base import BaseForecastingModel
from .least_squares import solve_least_squares

logger = structlog.get_logger(__name__)


def candidate_orders(n_points: int, max_order: int) -> List[int]:
    """Lag orders to try, largest first, all satisfying ``p < n / 2``."""
    upper = min(max_order, math.ceil(n_points / 2) - 1)
    return list(range(upper, 0, -1))


def lag_matrix(values: np.ndarray, order: int) -> np.ndarray:
    """Rows ``[v[t-1], ..., v[t-order]]`` for ``t = order .. n-1``."""
    n_rows = values.size - order
    return np.column_stack(
        [values[order - lag : order - lag + n_rows] for lag in range(1, order + 1)]
    )


class AutoregressiveModel(BaseForecastingModel):
    """``v[t] = c + phi_1 v[t-1] + ... + phi_p v[t-p]``.

    The order starts at the configured maximum (capped so ``p < n/2``) and
    steps down until the lag design is well-conditioned. Values are centred
    on their mean before fitting; the stored intercept is for raw values.
    """

    model_type = ModelType.AUTOREGRESSIVE

    def minimum_points(self, options: ModelOptions) -> int:
        return 3

    def _fit(
        self, series: TimeSeries, options: ModelOptions, scope: IResourceScope
    ) -> TrainedModel:
        values = scope.track(np.asarray(series.values, dtype=np.float64))
        orders = candidate_orders(values.size, options.max_autoregressive_order)
        if not orders:
            raise InsufficientDataError(
                required=3,
                available=values.size,
                reason="autoregressive model needs at least one lag",
            )

        mean = float(np.mean(values))
        centred = scope.track(values - mean)
        rejected: Dict[int, str] = {}

        for order in orders:
            lags = scope.track(lag_matrix(centred, order))
            design = scope.track(
                np.column_stack([np.ones(lags.shape[0]), lags])
            )
            target = centred[order:]
            try:
                solution = solve_least_squares(
                    design,
                    target,
                    max_condition_number=options.max_condition_number,
                    scope=scope,
                    label=f"autoregressive(order={order})",
                )
            except TrainingFailureError as exc:
                rejected[order] = exc.message
                logger.debug(
                    "model.autoregressive.order_rejected",
                    entity_id=series.entity_id,
                    order=order,
                    error=exc.message,
                )
                continue

            phis = tuple(float(value) for value in solution[1:])
            intercept = float(solution[0]) + mean * (1.0 - sum(phis))
            return TrainedModel(
                model_type=self.model_type,
                intercept=intercept,
                coefficients=phis,
                origin=series.origin,
                last_index=series.period_indices()[-1],
                n_observations=len(series),
                order=order,
            )

        raise TrainingFailureError(
            "autoregressive: no lag order produced a well-conditioned fit",
            details={"rejected_orders": rejected},
        )

    def _forecast(
        self,
        model: TrainedModel,
        series: TimeSeries,
        horizon: int,
        scope: IResourceScope,
    ) -> np.ndarray:
        order = len(model.coefficients)
        if len(series) < order:
            raise ValueError(
                f"Autoregressive forecast needs {order} lagged values, "
                f"got {len(series)}"
            )

        weights = np.asarray(model.coefficients, dtype=np.float64)
        # Most recent value first, matching the coefficient order.
        window = scope.track(np.asarray(series.values[::-1][:order], dtype=np.float64))
        forecasts = scope.allocate(horizon)

        for step in range(horizon):
            estimate = max(0.0, model.intercept + float(weights @ window))
            forecasts[step] = estimate
            window = scope.track(np.concatenate(([estimate], window[:-1])))

        return forecasts

    def _fitted(
        self, model: TrainedModel, series: TimeSeries, scope: IResourceScope
    ) -> Tuple[np.ndarray, np.ndarray]:
        order = len(model.coefficients)
        values = scope.track(np.asarray(series.values, dtype=np.float64))
        lags = scope.track(lag_matrix(values, order))
        weights = np.asarray(model.coefficients, dtype=np.float64)
        return values[order:], model.intercept + lags @ weights
