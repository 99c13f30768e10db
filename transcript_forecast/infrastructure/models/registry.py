"""Lookup of model implementations by type."""

from __future__ import annotations

from typing import Dict, Tuple

from transcript_forecast.domain.entities.model import ModelType
from transcript_forecast.domain.ports.forecasting_model import IForecastingModel
from transcript_forecast.domain.ports.resource_ledger import IResourceLedger

from .autoregressive_model import AutoregressiveModel
from .linear_model import LinearTrendModel
from .polynomial_model import PolynomialTrendModel


class ModelRegistry:
    """Holds one stateless instance of every supported strategy."""

    def __init__(self, ledger: IResourceLedger):
        self._models: Dict[ModelType, IForecastingModel] = {
            ModelType.LINEAR: LinearTrendModel(ledger),
            ModelType.POLYNOMIAL: PolynomialTrendModel(ledger),
            ModelType.AUTOREGRESSIVE: AutoregressiveModel(ledger),
        }

    def get(self, model_type: ModelType) -> IForecastingModel:
        try:
            return self._models[ModelType(model_type)]
        except (KeyError, ValueError) as exc:
            raise KeyError(f"No model registered for {model_type!r}") from exc

    def supported_types(self) -> Tuple[ModelType, ...]:
        return tuple(self._models)
