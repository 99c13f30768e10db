"""Domain service helpers for validating prediction requests."""

import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any, List, Optional

from transcript_forecast.domain.entities.errors import InvalidRequestError
from transcript_forecast.domain.entities.model import ModelType
from transcript_forecast.domain.entities.prediction import (
    PredictionRequest,
    ResolvedPredictionRequest,
)


@dataclass(frozen=True)
class RequestPolicy:
    """Defaults and limits applied at the request boundary."""

    default_polynomial_degree: int = 2
    max_polynomial_degree: int = 10
    max_horizon: int = 365
    default_validation_split: float = 0.2
    default_confidence_level: float = 0.95
    min_confidence_level: float = 0.5
    max_confidence_level: float = 0.99


def _is_int(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(float(value))
    )


def _resolve_model_type(value: Any, errors: List[str]) -> Optional[ModelType]:
    if isinstance(value, ModelType):
        return value
    if isinstance(value, str):
        try:
            return ModelType(value.strip().lower())
        except ValueError:
            pass
    supported = ", ".join(item.value for item in ModelType)
    errors.append(f"Unsupported model type {value!r}; expected one of: {supported}.")
    return None


def _validate_horizon(
    request: PredictionRequest, policy: RequestPolicy, errors: List[str]
) -> None:
    if not _is_int(request.horizon):
        errors.append("Horizon must be an integer.")
    elif request.horizon < 1:
        errors.append("Horizon must be at least 1 period.")
    elif request.horizon > policy.max_horizon:
        errors.append(f"Horizon must not exceed {policy.max_horizon} periods.")


def validate_prediction_request(
    request: PredictionRequest, policy: Optional[RequestPolicy] = None
) -> ResolvedPredictionRequest:
    """Validate a request and resolve its optional fields.

    Raises:
        InvalidRequestError: If one or more validation rules fail.
    """

    policy = policy or RequestPolicy()
    errors: List[str] = []

    if not isinstance(request.entity_id, str) or not request.entity_id.strip():
        errors.append("Entity ID must be provided.")

    _validate_horizon(request, policy, errors)
    model_type = _resolve_model_type(request.model_type, errors)

    degree = request.polynomial_degree
    if degree is None:
        degree = policy.default_polynomial_degree
    elif not _is_int(degree):
        errors.append("Polynomial degree must be an integer.")
    elif not 2 <= degree <= policy.max_polynomial_degree:
        errors.append(
            f"Polynomial degree must be between 2 and {policy.max_polynomial_degree}."
        )

    split = request.validation_split
    if split is None:
        split = policy.default_validation_split
    elif not _is_number(split) or not 0.0 < float(split) < 1.0:
        errors.append(
            "Validation split must be between 0 (exclusive) and 1 (exclusive)."
        )

    level = request.confidence_level
    if level is None:
        level = policy.default_confidence_level
    elif not _is_number(level) or not (
        policy.min_confidence_level <= float(level) <= policy.max_confidence_level
    ):
        errors.append(
            f"Confidence level must be between {policy.min_confidence_level} "
            f"and {policy.max_confidence_level}."
        )

    if errors or model_type is None:
        raise InvalidRequestError(errors)

    return ResolvedPredictionRequest(
        entity_id=request.entity_id.strip(),
        horizon=int(request.horizon),
        model_type=model_type,
        polynomial_degree=int(degree),
        validation_split=float(split),
        confidence_level=float(level),
    )
