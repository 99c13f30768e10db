from __future__ import annotations

from datetime import date

import pytest

from transcript_forecast.domain.entities.errors import InsufficientDataError
from transcript_forecast.domain.entities.model import ModelOptions, ModelType
from transcript_forecast.infrastructure.models.polynomial_model import (
    PolynomialTrendModel,
)


def test_polynomial_model_recovers_quadratic_trend(ledger, series_factory) -> None:
    values = [5 + 2 * x + 3 * x * x for x in range(8)]
    series = series_factory(values)
    model = PolynomialTrendModel(ledger)

    trained = model.train(series, ModelOptions(polynomial_degree=2))
    forecast = model.predict(trained, series, 2)

    assert trained.model_type is ModelType.POLYNOMIAL
    assert trained.degree == 2
    assert trained.index_scale == pytest.approx(7.0)
    assert len(trained.coefficients) == 2
    assert [value for _, value in forecast] == pytest.approx(
        [5 + 2 * 8 + 3 * 64, 5 + 2 * 9 + 3 * 81], rel=1e-6
    )


def test_polynomial_model_fits_higher_degrees(ledger, series_factory) -> None:
    values = [x**3 - 4 * x * x + 50 for x in range(10)]
    series = series_factory(values)
    model = PolynomialTrendModel(ledger)

    trained = model.train(series, ModelOptions(polynomial_degree=3))
    actual, fitted = model.in_sample(trained, series)

    assert fitted.tolist() == pytest.approx(actual.tolist(), abs=1e-6)


def test_polynomial_degree_five_needs_six_points(ledger, series_factory) -> None:
    model = PolynomialTrendModel(ledger)

    with pytest.raises(InsufficientDataError) as exc:
        model.train(series_factory([10, 20, 15, 30]), ModelOptions(polynomial_degree=5))

    assert exc.value.required == 6
    assert exc.value.available == 4
    assert ledger.memory_usage().num_buffers == 0


def test_polynomial_minimum_points_follow_degree(ledger) -> None:
    model = PolynomialTrendModel(ledger)

    assert model.minimum_points(ModelOptions(polynomial_degree=2)) == 3
    assert model.minimum_points(ModelOptions(polynomial_degree=4)) == 5


def test_polynomial_forecast_months_follow_history(ledger, series_factory) -> None:
    series = series_factory([10, 14, 20, 28], start=date(2024, 10, 1))
    model = PolynomialTrendModel(ledger)
    trained = model.train(series, ModelOptions())

    forecast = model.predict(trained, series, 3)

    assert [month for month, _ in forecast] == [
        date(2025, 2, 1),
        date(2025, 3, 1),
        date(2025, 4, 1),
    ]
    assert all(value >= 0.0 for _, value in forecast)
