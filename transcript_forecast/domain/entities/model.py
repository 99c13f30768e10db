"""
Domain Entities - Model

This module defines the core domain entities related to forecasting models:
the supported strategies, their training options and the parameter set a
training call produces.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class ModelType(str, Enum):
    """Type of forecasting strategy."""

    LINEAR = "linear"
    POLYNOMIAL = "polynomial"
    AUTOREGRESSIVE = "autoregressive"


@dataclass(frozen=True)
class ModelOptions:
    """Per-call options handed to a model's ``train``."""

    polynomial_degree: int = 2
    max_autoregressive_order: int = 2
    max_condition_number: float = 1e10


@dataclass(frozen=True)
class TrainedModel:
    """Parameters produced by one training call.

    ``coefficients`` are ordered by power for polynomial fits (x^1..x^d,
    slope first for linear) and by lag for autoregressive fits (lag 1 first).
    """

    model_type: ModelType
    intercept: float
    coefficients: Tuple[float, ...]
    origin: date
    last_index: int
    n_observations: int
    degree: Optional[int] = None
    order: Optional[int] = None
    index_scale: float = 1.0
