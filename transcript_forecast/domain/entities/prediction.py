"""Domain entities for forecast requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .model import ModelType


@dataclass(frozen=True)
class PredictionRequest:
    """A single forecast request for one entity.

    ``model_type`` is kept as given so that unsupported values reach request
    validation instead of failing at construction time.
    """

    entity_id: str
    horizon: int
    model_type: Union[ModelType, str] = ModelType.LINEAR
    polynomial_degree: Optional[int] = None
    validation_split: Optional[float] = None
    confidence_level: Optional[float] = None


@dataclass(frozen=True)
class ResolvedPredictionRequest:
    """A validated request with every optional field resolved to a value."""

    entity_id: str
    horizon: int
    model_type: ModelType
    polynomial_degree: int
    validation_split: float
    confidence_level: float
