from __future__ import annotations

from datetime import date

import numpy as np

from transcript_forecast.domain.entities.time_series import TimeSeries, TimeSeriesPoint
from transcript_forecast.domain.services.data_quality import (
    DataQualityPolicy,
    assess_data_quality,
    count_outliers,
)

POLICY = DataQualityPolicy()
TODAY = date(2024, 7, 10)


def test_count_outliers_uses_tukey_fences() -> None:
    values = np.array([10, 11, 12, 13, 12, 11, 500], dtype=float)

    assert count_outliers(values, 1.5) == 1


def test_count_outliers_ignores_tiny_samples() -> None:
    assert count_outliers(np.array([1.0, 1000.0, 1.0]), 1.5) == 0


def test_clean_recent_history_has_no_warnings(series_factory) -> None:
    series = series_factory([100, 110, 120, 130, 140, 150], start=date(2024, 1, 1))

    assert assess_data_quality(series, TODAY, POLICY) == []


def test_constant_history_warns_about_low_variance(series_factory) -> None:
    series = series_factory([50, 50, 50, 50], start=date(2024, 3, 1))

    warnings = assess_data_quality(series, TODAY, POLICY)

    assert any("low variance" in item for item in warnings)


def test_outliers_are_reported(series_factory) -> None:
    series = series_factory([10, 11, 12, 13, 12, 11, 500], start=date(2024, 1, 1))

    warnings = assess_data_quality(series, TODAY, POLICY)

    assert any("1 potential outliers" in item for item in warnings)


def test_gaps_are_reported_with_their_months() -> None:
    series = TimeSeries(
        entity_id="acme",
        points=(
            TimeSeriesPoint(date(2024, 4, 1), 10),
            TimeSeriesPoint(date(2024, 6, 1), 14),
            TimeSeriesPoint(date(2024, 7, 1), 15),
        ),
        gaps=(date(2024, 5, 1),),
    )

    warnings = assess_data_quality(series, TODAY, POLICY)

    assert any("2024-05" in item for item in warnings)


def test_stale_history_is_reported(series_factory) -> None:
    series = series_factory([100, 110, 120], start=date(2023, 1, 1))

    warnings = assess_data_quality(series, TODAY, POLICY)

    assert any("months old" in item for item in warnings)


def test_empty_series_has_no_warnings() -> None:
    assert assess_data_quality(TimeSeries(entity_id="acme"), TODAY, POLICY) == []
