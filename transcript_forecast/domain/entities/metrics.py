"""Domain entities for model quality metrics and validation reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class ValidationMetrics:
    """Residual-based accuracy metrics for one comparison of predictions."""

    mse: float
    mae: float
    rmse: float
    r2: float
    accuracy: float


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of validating one model type against a series."""

    training_metrics: ValidationMetrics
    validation_metrics: Optional[ValidationMetrics] = None
    cross_validation_score: Optional[float] = None
    cross_validation_folds: int = 0
    validation_skipped: bool = False
    warnings: Tuple[str, ...] = field(default=())

    @property
    def ranking_metrics(self) -> ValidationMetrics:
        """Validation metrics, or training metrics when validation was skipped."""
        return self.validation_metrics or self.training_metrics


@dataclass(frozen=True, slots=True)
class MemoryUsage:
    """Outstanding numeric buffers tracked by the resource ledger."""

    num_buffers: int = 0
    num_bytes: int = 0
