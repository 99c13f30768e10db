from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pytest

from transcript_forecast.application.use_cases.forecast_use_case import ForecastUseCase
from transcript_forecast.application.use_cases.model_comparison_use_case import (
    ModelComparisonUseCase,
)
from transcript_forecast.application.use_cases.model_validation_use_case import (
    ModelValidationUseCase,
)
from transcript_forecast.application.use_cases.series_builder_use_case import (
    SeriesBuilderUseCase,
)
from transcript_forecast.domain.entities.model import ModelOptions
from transcript_forecast.domain.entities.time_series import (
    TimeSeries,
    TimeSeriesPoint,
    add_months,
)
from transcript_forecast.infrastructure.models.registry import ModelRegistry
from transcript_forecast.infrastructure.services.resource_ledger import (
    NumericResourceLedger,
)

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_records(
    values: Sequence[int],
    client: str = "Acme Corp",
    start: date = date(2024, 1, 1),
) -> List[Dict[str, Any]]:
    """Consecutive monthly records in the camelCase wire format."""
    return [
        {
            "clientName": client,
            "month": add_months(start, offset).strftime("%Y-%m"),
            "transcriptCount": value,
        }
        for offset, value in enumerate(values)
    ]


def make_series(
    values: Sequence[int],
    entity_id: str = "Acme Corp",
    start: date = date(2024, 1, 1),
) -> TimeSeries:
    return TimeSeries(
        entity_id=entity_id,
        points=tuple(
            TimeSeriesPoint(timestamp=add_months(start, offset), value=value)
            for offset, value in enumerate(values)
        ),
    )


@pytest.fixture()
def ledger() -> NumericResourceLedger:
    return NumericResourceLedger()


@pytest.fixture()
def registry(ledger: NumericResourceLedger) -> ModelRegistry:
    return ModelRegistry(ledger)


@pytest.fixture()
def model_options() -> ModelOptions:
    return ModelOptions()


@pytest.fixture()
def series_builder() -> SeriesBuilderUseCase:
    return SeriesBuilderUseCase()


@pytest.fixture()
def validation_use_case(registry: ModelRegistry) -> ModelValidationUseCase:
    return ModelValidationUseCase(registry=registry)


@pytest.fixture()
def forecast_use_case(
    series_builder: SeriesBuilderUseCase,
    validation_use_case: ModelValidationUseCase,
    registry: ModelRegistry,
    ledger: NumericResourceLedger,
) -> ForecastUseCase:
    return ForecastUseCase(
        series_builder=series_builder,
        validator=validation_use_case,
        registry=registry,
        ledger=ledger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def comparison_use_case(forecast_use_case: ForecastUseCase) -> ModelComparisonUseCase:
    return ModelComparisonUseCase(forecast_use_case=forecast_use_case)


@pytest.fixture()
def linear_records() -> List[Dict[str, Any]]:
    """Twelve months of a strictly linear history ending 2024-12."""
    return make_records([100 + 10 * offset for offset in range(12)])


@pytest.fixture()
def seasonal_records() -> List[Dict[str, Any]]:
    values = [120, 135, 150, 140, 160, 175, 165, 185, 200, 190, 210, 225]
    return make_records(values, start=date(2023, 8, 1))


@pytest.fixture()
def records_factory():
    return make_records


@pytest.fixture()
def series_factory():
    return make_series
