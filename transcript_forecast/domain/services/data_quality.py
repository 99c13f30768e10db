"""Domain service producing non-fatal data-quality warnings for a series."""

from dataclasses import dataclass
from datetime import date
from typing import List

import numpy as np

from transcript_forecast.domain.entities.time_series import (
    TimeSeries,
    format_month,
    month_offset,
)


@dataclass(frozen=True)
class DataQualityPolicy:
    low_variance_threshold: float = 0.01
    outlier_iqr_multiplier: float = 1.5
    stale_after_months: int = 2


def count_outliers(values: np.ndarray, multiplier: float) -> int:
    """Number of values outside the Tukey fences ``[q1 - m*iqr, q3 + m*iqr]``."""
    if values.size < 4:
        return 0
    q1, q3 = np.percentile(values, [25, 75])
    iqr = q3 - q1
    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr
    return int(np.count_nonzero((values < lower) | (values > upper)))


def assess_data_quality(
    series: TimeSeries, today: date, policy: DataQualityPolicy
) -> List[str]:
    """Return human-readable warnings about ``series``; never raises."""

    warnings: List[str] = []
    if not series.points:
        return warnings

    values = np.asarray(series.values, dtype=np.float64)

    if values.size > 1 and float(np.var(values)) < policy.low_variance_threshold:
        warnings.append(
            "Data has very low variance, predictions may be less accurate."
        )

    outliers = count_outliers(values, policy.outlier_iqr_multiplier)
    if outliers:
        warnings.append(f"Detected {outliers} potential outliers in the data.")

    if series.gaps:
        missing = ", ".join(format_month(gap) for gap in series.gaps)
        warnings.append(
            f"History has {len(series.gaps)} missing months ({missing}); "
            "they are treated as absent, not as zero."
        )

    current_month = date(today.year, today.month, 1)
    age = month_offset(series.points[-1].timestamp, current_month)
    if age > policy.stale_after_months:
        warnings.append(
            f"Latest data is {age} months old, predictions may be less accurate."
        )

    return warnings
