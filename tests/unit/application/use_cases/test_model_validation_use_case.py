from __future__ import annotations

import math

import pytest

from transcript_forecast.application.use_cases.model_validation_use_case import (
    ModelValidationUseCase,
    calculate_metrics,
)
from transcript_forecast.domain.entities.errors import TrainingFailureError
from transcript_forecast.domain.entities.model import ModelOptions, ModelType


def test_calculate_metrics_matches_hand_computed_values() -> None:
    metrics = calculate_metrics([100.0, 200.0], [110.0, 180.0])

    assert metrics.mse == pytest.approx((100 + 400) / 2)
    assert metrics.mae == pytest.approx(15.0)
    assert metrics.rmse == pytest.approx(math.sqrt(250.0))
    assert metrics.r2 == pytest.approx(1 - 500 / 5000)
    assert metrics.accuracy == pytest.approx(100 - (0.1 + 0.1) / 2 * 100)


def test_calculate_metrics_handles_constant_actuals() -> None:
    metrics = calculate_metrics([50.0, 50.0, 50.0], [50.0, 50.0, 50.0])

    assert metrics.r2 == 0.0
    assert metrics.accuracy == pytest.approx(100.0)


def test_calculate_metrics_uses_unit_floor_for_zero_counts() -> None:
    metrics = calculate_metrics([0.0], [0.5])

    assert metrics.accuracy == pytest.approx(50.0)


def test_calculate_metrics_clamps_accuracy_at_zero() -> None:
    metrics = calculate_metrics([10.0], [100.0])

    assert metrics.accuracy == 0.0


def test_calculate_metrics_rejects_mismatched_inputs() -> None:
    with pytest.raises(ValueError):
        calculate_metrics([1.0, 2.0], [1.0])
    with pytest.raises(ValueError):
        calculate_metrics([], [])


def test_validate_scores_holdout_segment(
    validation_use_case: ModelValidationUseCase, series_factory
) -> None:
    series = series_factory([100 + 10 * step for step in range(10)])

    report = validation_use_case.validate(series, ModelType.LINEAR, ModelOptions(), 0.2)

    assert report.validation_skipped is False
    assert report.validation_metrics is not None
    assert report.validation_metrics.accuracy == pytest.approx(100.0)
    assert report.validation_metrics.rmse == pytest.approx(0.0, abs=1e-9)
    assert report.training_metrics.accuracy == pytest.approx(100.0)
    assert report.ranking_metrics is report.validation_metrics


def test_validate_reports_cross_validation_score(
    validation_use_case: ModelValidationUseCase, series_factory
) -> None:
    series = series_factory([100 + 10 * step for step in range(10)])

    report = validation_use_case.validate(series, "linear", ModelOptions(), 0.2)

    assert report.cross_validation_folds == 5
    assert report.cross_validation_score == pytest.approx(100.0)


def test_validate_skips_holdout_when_training_segment_is_too_short(
    validation_use_case: ModelValidationUseCase, series_factory
) -> None:
    series = series_factory([10, 20, 30])

    report = validation_use_case.validate(
        series, ModelType.POLYNOMIAL, ModelOptions(polynomial_degree=2), 0.2
    )

    assert report.validation_skipped is True
    assert report.validation_metrics is None
    assert report.ranking_metrics is report.training_metrics
    assert any("Validation skipped" in item for item in report.warnings)


def test_validate_falls_back_to_in_sample_when_holdout_fit_fails(
    validation_use_case: ModelValidationUseCase, registry, series_factory, monkeypatch
) -> None:
    series = series_factory([10, 20, 30, 40, 50])
    model = registry.get(ModelType.LINEAR)
    original_train = model.train

    def train(history, options):
        if len(history) < len(series):
            raise TrainingFailureError("holdout design is singular")
        return original_train(history, options)

    monkeypatch.setattr(model, "train", train)

    report = validation_use_case.validate(series, ModelType.LINEAR, ModelOptions(), 0.2)

    assert report.validation_skipped is True
    assert report.validation_metrics is None
    assert report.training_metrics.accuracy == pytest.approx(100.0)
    assert any("holdout design is singular" in item for item in report.warnings)


def test_validate_marks_cross_validation_neutral_on_short_history(
    validation_use_case: ModelValidationUseCase, series_factory
) -> None:
    series = series_factory([100, 110, 120])

    report = validation_use_case.validate(series, ModelType.LINEAR, ModelOptions(), 0.2)

    assert report.cross_validation_score is None
    assert report.cross_validation_folds == 0
    assert any("cross-validation" in item for item in report.warnings)


def test_validate_compares_holdout_by_month_across_gaps(
    validation_use_case: ModelValidationUseCase, series_builder
) -> None:
    records = [
        {"clientName": "Acme", "month": f"2024-{month:02d}", "transcriptCount": value}
        for month, value in [(1, 100), (2, 110), (3, 120), (4, 130), (6, 150)]
    ]
    series = series_builder.build(records, "Acme")

    report = validation_use_case.validate(series, ModelType.LINEAR, ModelOptions(), 0.2)

    assert report.validation_metrics is not None
    assert report.validation_metrics.accuracy == pytest.approx(100.0)


def test_validate_propagates_failures_of_the_full_series_fit(
    validation_use_case: ModelValidationUseCase, series_factory
) -> None:
    series = series_factory([40, 40, 40, 40])

    with pytest.raises(TrainingFailureError):
        validation_use_case.validate(
            series, ModelType.AUTOREGRESSIVE, ModelOptions(), 0.2
        )


def test_validate_leaves_no_buffers_behind(
    validation_use_case: ModelValidationUseCase, ledger, series_factory
) -> None:
    series = series_factory([12, 18, 15, 22, 27, 25, 31, 36])

    for model_type in ModelType:
        validation_use_case.validate(series, model_type, ModelOptions(), 0.25)

    assert ledger.memory_usage().num_buffers == 0
