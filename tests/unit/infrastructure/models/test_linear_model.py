from __future__ import annotations

from datetime import date

import pytest

from transcript_forecast.domain.entities.errors import InsufficientDataError
from transcript_forecast.domain.entities.model import ModelType
from transcript_forecast.domain.entities.time_series import TimeSeries, TimeSeriesPoint
from transcript_forecast.infrastructure.models.linear_model import LinearTrendModel
from transcript_forecast.infrastructure.models.polynomial_model import (
    PolynomialTrendModel,
)


def test_linear_model_fits_slope_and_intercept(
    ledger, model_options, series_factory
) -> None:
    model = LinearTrendModel(ledger)

    trained = model.train(series_factory([100, 110, 120]), model_options)

    assert trained.model_type is ModelType.LINEAR
    assert trained.intercept == pytest.approx(100.0)
    assert trained.coefficients == pytest.approx((10.0,))
    assert trained.n_observations == 3
    assert trained.last_index == 2


def test_linear_model_forecasts_following_months(
    ledger, model_options, series_factory
) -> None:
    model = LinearTrendModel(ledger)
    series = series_factory([100, 110, 120], start=date(2024, 11, 1))
    trained = model.train(series, model_options)

    forecast = model.predict(trained, series, 2)

    assert [month for month, _ in forecast] == [date(2025, 2, 1), date(2025, 3, 1)]
    assert [value for _, value in forecast] == pytest.approx([130.0, 140.0])
    assert ledger.memory_usage().num_buffers == 0


def test_linear_model_clamps_negative_estimates(
    ledger, model_options, series_factory
) -> None:
    model = LinearTrendModel(ledger)
    series = series_factory([30, 20, 10])
    trained = model.train(series, model_options)

    forecast = model.predict(trained, series, 3)

    assert [value for _, value in forecast] == pytest.approx([0.0, 0.0, 0.0])


def test_linear_model_uses_month_offsets_across_gaps(ledger, model_options) -> None:
    model = LinearTrendModel(ledger)
    series = TimeSeries(
        entity_id="acme",
        points=(
            TimeSeriesPoint(date(2024, 1, 1), 100),
            TimeSeriesPoint(date(2024, 2, 1), 110),
            TimeSeriesPoint(date(2024, 4, 1), 130),
        ),
        gaps=(date(2024, 3, 1),),
    )

    trained = model.train(series, model_options)
    forecast = model.predict(trained, series, 1)

    assert trained.coefficients[0] == pytest.approx(10.0)
    assert forecast[0] == (date(2024, 5, 1), pytest.approx(140.0))


def test_linear_model_requires_two_points(
    ledger, model_options, series_factory
) -> None:
    with pytest.raises(InsufficientDataError):
        LinearTrendModel(ledger).train(series_factory([5]), model_options)


def test_linear_model_is_deterministic(ledger, model_options, series_factory) -> None:
    model = LinearTrendModel(ledger)
    series = series_factory([12, 19, 17, 25, 31, 28])

    first = model.train(series, model_options)
    second = model.train(series, model_options)

    assert first == second
    assert model.predict(first, series, 4) == model.predict(second, series, 4)


def test_in_sample_returns_actual_and_fitted_values(
    ledger, model_options, series_factory
) -> None:
    model = LinearTrendModel(ledger)
    series = series_factory([100, 110, 120])
    trained = model.train(series, model_options)

    actual, fitted = model.in_sample(trained, series)

    assert actual.tolist() == [100.0, 110.0, 120.0]
    assert fitted.tolist() == pytest.approx([100.0, 110.0, 120.0])


def test_predict_rejects_parameters_of_another_model(
    ledger, model_options, series_factory
) -> None:
    series = series_factory([100, 110, 120])
    trained = LinearTrendModel(ledger).train(series, model_options)

    with pytest.raises(ValueError):
        PolynomialTrendModel(ledger).predict(trained, series, 1)


def test_predict_rejects_non_positive_horizons(
    ledger, model_options, series_factory
) -> None:
    model = LinearTrendModel(ledger)
    series = series_factory([100, 110, 120])
    trained = model.train(series, model_options)

    with pytest.raises(ValueError):
        model.predict(trained, series, 0)
