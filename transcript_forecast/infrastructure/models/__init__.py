"""Forecasting model implementations."""

from .autoregressive_model import AutoregressiveModel
from .base import BaseForecastingModel
from .linear_model import LinearTrendModel
from .polynomial_model import PolynomialTrendModel
from .registry import ModelRegistry

__all__ = [
    "AutoregressiveModel",
    "BaseForecastingModel",
    "LinearTrendModel",
    "ModelRegistry",
    "PolynomialTrendModel",
]
