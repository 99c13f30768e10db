"""Least-squares solver shared by the regression-based models."""

from __future__ import annotations

import numpy as np

from transcript_forecast.domain.entities.errors import TrainingFailureError
from transcript_forecast.domain.ports.resource_ledger import IResourceScope


def solve_least_squares(
    design: np.ndarray,
    target: np.ndarray,
    max_condition_number: float,
    scope: IResourceScope,
    label: str,
) -> np.ndarray:
    """Solve ``design @ beta ~= target`` or fail loudly.

    Columns are equilibrated to unit norm before solving so the condition
    check is independent of the scale of each regressor.

    Raises:
        TrainingFailureError: If the system is underdetermined, rank
            deficient, ill-conditioned, or yields non-finite coefficients.
    """

    rows, columns = design.shape
    if rows < columns:
        raise TrainingFailureError(
            f"{label}: underdetermined system ({rows} equations, {columns} unknowns)",
            details={"equations": rows, "unknowns": columns},
        )

    norms = scope.track(np.linalg.norm(design, axis=0))
    if not np.all(np.isfinite(norms)) or np.any(norms == 0.0):
        raise TrainingFailureError(
            f"{label}: design matrix has a degenerate column",
            details={"column_norms": norms.tolist()},
        )

    scaled = scope.track(design / norms)
    solution, _, rank, singular_values = np.linalg.lstsq(scaled, target, rcond=None)
    scope.track(solution)

    if rank < columns:
        raise TrainingFailureError(
            f"{label}: design matrix is singular (rank {rank} < {columns})",
            details={"rank": int(rank), "unknowns": columns},
        )

    condition = float(singular_values[0] / singular_values[-1])
    if not np.isfinite(condition) or condition > max_condition_number:
        raise TrainingFailureError(
            f"{label}: design matrix is ill-conditioned (condition {condition:.3g})",
            details={"condition_number": condition, "limit": max_condition_number},
        )

    coefficients = solution / norms
    if not np.all(np.isfinite(coefficients)):
        raise TrainingFailureError(
            f"{label}: fit produced non-finite coefficients",
            details={"coefficients": coefficients.tolist()},
        )
    return coefficients
