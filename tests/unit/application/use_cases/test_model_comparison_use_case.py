from __future__ import annotations

from dataclasses import replace

import pytest

from transcript_forecast.application.use_cases.model_comparison_use_case import (
    ModelComparisonUseCase,
)
from transcript_forecast.domain.entities.errors import (
    ComparisonFailureError,
    ForecastCancelledError,
    InsufficientDataError,
    InvalidRequestError,
    TrainingFailureError,
)
from transcript_forecast.domain.entities.model import ModelType
from transcript_forecast.domain.entities.prediction import PredictionRequest
from transcript_forecast.shared.cancellation import CancellationToken

REQUEST = PredictionRequest(entity_id="Acme Corp", horizon=3)


def test_linear_history_recommends_linear_model(
    comparison_use_case: ModelComparisonUseCase, linear_records
) -> None:
    result = comparison_use_case.compare_models(linear_records, REQUEST)

    assert result.best_model == "linear"
    assert result.ranking[0] == "linear"
    assert set(result.per_model) == {"linear", "polynomial", "autoregressive"}
    assert result.per_model["linear"].metrics.accuracy == pytest.approx(100.0)
    assert result.partial_failure is False
    assert result.failures == {}
    assert "linear model is recommended" in result.recommendation


def test_best_model_has_the_highest_holdout_accuracy(
    comparison_use_case: ModelComparisonUseCase, seasonal_records
) -> None:
    result = comparison_use_case.compare_models(seasonal_records, REQUEST)

    holdout = {
        name: entry.result.validation_metrics.accuracy
        for name, entry in result.per_model.items()
        if entry.result.validation_metrics is not None
    }
    assert holdout[result.best_model] == max(holdout.values())
    validated_ranking = [name for name in result.ranking if name in holdout]
    assert [holdout[name] for name in validated_ranking] == sorted(
        holdout.values(), reverse=True
    )


def test_validated_model_outranks_skipped_in_sample_fits(
    comparison_use_case: ModelComparisonUseCase, records_factory
) -> None:
    result = comparison_use_case.compare_models(
        records_factory([100, 130, 110]), PredictionRequest("Acme Corp", horizon=2)
    )

    assert result.best_model == "linear"
    assert result.per_model["linear"].result.validation_metrics is not None
    for name in result.ranking[1:]:
        assert result.per_model[name].result.validation_skipped is True
    assert "in-sample" not in result.recommendation
    assert "performs similarly" not in result.recommendation


def test_recommendation_flags_in_sample_accuracy_when_nothing_validated(
    comparison_use_case: ModelComparisonUseCase, records_factory
) -> None:
    request = PredictionRequest("Acme Corp", horizon=2, validation_split=0.9)

    result = comparison_use_case.compare_models(
        records_factory([100, 130, 110]), request
    )

    assert all(entry.result.validation_skipped for entry in result.per_model.values())
    assert "in-sample accuracy" in result.recommendation


def test_each_result_uses_its_own_model_type(
    comparison_use_case: ModelComparisonUseCase, seasonal_records
) -> None:
    result = comparison_use_case.compare_models(
        seasonal_records, replace(REQUEST, model_type=ModelType.AUTOREGRESSIVE)
    )

    for name, entry in result.per_model.items():
        assert entry.result.model_type == name
        assert len(entry.result.predictions) == 3


def test_short_history_recommendation_asks_for_more_data(
    comparison_use_case: ModelComparisonUseCase, seasonal_records
) -> None:
    result = comparison_use_case.compare_models(seasonal_records, REQUEST)

    assert "collecting more history" in result.recommendation


def test_near_tie_mentions_runner_up(
    comparison_use_case: ModelComparisonUseCase, linear_records
) -> None:
    result = comparison_use_case.compare_models(linear_records, REQUEST)

    runner_up = result.ranking[1]
    assert f"The {runner_up} model performs similarly" in result.recommendation


def test_partial_failure_is_reported_as_metadata(
    comparison_use_case: ModelComparisonUseCase, records_factory
) -> None:
    records = records_factory([40, 40, 40, 40, 40, 40])

    result = comparison_use_case.compare_models(records, REQUEST)

    assert result.partial_failure is True
    assert "autoregressive" in result.failures
    assert "autoregressive" not in result.per_model
    assert result.best_model in {"linear", "polynomial"}


def test_all_models_failing_raises_comparison_failure(
    forecast_use_case, records_factory, monkeypatch
) -> None:
    def failing_forecast(series, request, cancellation=None):
        raise TrainingFailureError(f"{request.model_type.value} diverged")

    monkeypatch.setattr(forecast_use_case, "forecast_series", failing_forecast)
    use_case = ModelComparisonUseCase(forecast_use_case=forecast_use_case)

    with pytest.raises(ComparisonFailureError) as exc:
        use_case.compare_models(records_factory([10, 20, 30, 40]), REQUEST)

    assert set(exc.value.failures) == {"linear", "polynomial", "autoregressive"}
    assert exc.value.failures["linear"] == "linear diverged"


def test_request_and_data_errors_fail_fast(
    comparison_use_case: ModelComparisonUseCase, records_factory
) -> None:
    with pytest.raises(InvalidRequestError):
        comparison_use_case.compare_models(
            records_factory([10, 20, 30]),
            PredictionRequest(entity_id="Acme Corp", horizon=-2),
        )
    with pytest.raises(InsufficientDataError):
        comparison_use_case.compare_models(records_factory([10, 20]), REQUEST)


def test_cancellation_between_models_stops_the_comparison(
    forecast_use_case, seasonal_records, ledger
) -> None:
    token = CancellationToken()
    attempted = []
    original = forecast_use_case.forecast_series

    def cancel_after_first(series, request, cancellation=None):
        attempted.append(request.model_type.value)
        result = original(series, request, cancellation)
        token.cancel("caller gave up")
        return result

    forecast_use_case.forecast_series = cancel_after_first
    use_case = ModelComparisonUseCase(forecast_use_case=forecast_use_case)

    with pytest.raises(ForecastCancelledError) as exc:
        use_case.compare_models(seasonal_records, REQUEST, cancellation=token)

    assert attempted == ["linear"]
    assert exc.value.checkpoint == "comparison.polynomial"
    assert ledger.memory_usage().num_buffers == 0
