"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the engine.
"""

from typing import Optional

from dependency_injector import containers, providers

from transcript_forecast.application.use_cases.forecast_use_case import (
    ForecastUseCase,
    utc_now,
)
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
from transcript_forecast.domain.services.data_quality import DataQualityPolicy
from transcript_forecast.domain.services.request_validator import RequestPolicy
from transcript_forecast.infrastructure.models.registry import ModelRegistry
from transcript_forecast.infrastructure.services.resource_ledger import (
    NumericResourceLedger,
)
from transcript_forecast.shared import get_logger, update_logging_from_settings

from .config import AppSettings, get_settings
from .engine import ForecastEngine

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    # Settings
    config = providers.Configuration()
    clock = providers.Object(utc_now)

    # Infrastructure
    resource_ledger = providers.Singleton(NumericResourceLedger)

    model_registry = providers.Singleton(
        ModelRegistry,
        ledger=resource_ledger,
    )

    # Policies
    model_options = providers.Factory(
        ModelOptions,
        polynomial_degree=config.forecast.default_polynomial_degree,
        max_autoregressive_order=config.forecast.max_autoregressive_order,
        max_condition_number=config.forecast.max_condition_number,
    )

    request_policy = providers.Factory(
        RequestPolicy,
        default_polynomial_degree=config.forecast.default_polynomial_degree,
        max_polynomial_degree=config.forecast.max_polynomial_degree,
        max_horizon=config.forecast.max_horizon,
        default_validation_split=config.forecast.default_validation_split,
        default_confidence_level=config.forecast.default_confidence_level,
    )

    quality_policy = providers.Factory(
        DataQualityPolicy,
        low_variance_threshold=config.forecast.low_variance_threshold,
        outlier_iqr_multiplier=config.forecast.outlier_iqr_multiplier,
        stale_after_months=config.forecast.stale_after_months,
    )

    # Application (use cases)
    series_builder_use_case = providers.Factory(SeriesBuilderUseCase)

    model_validation_use_case = providers.Factory(
        ModelValidationUseCase,
        registry=model_registry,
        max_cv_folds=config.forecast.max_cv_folds,
        default_options=model_options,
    )

    forecast_use_case = providers.Factory(
        ForecastUseCase,
        series_builder=series_builder_use_case,
        validator=model_validation_use_case,
        registry=model_registry,
        ledger=resource_ledger,
        request_policy=request_policy,
        quality_policy=quality_policy,
        model_options=model_options,
        minimum_history_points=config.forecast.minimum_history_points,
        minimum_uncertainty_ratio=config.forecast.minimum_uncertainty_ratio,
        minimum_uncertainty=config.forecast.minimum_uncertainty,
        clock=clock,
    )

    model_comparison_use_case = providers.Factory(
        ModelComparisonUseCase,
        forecast_use_case=forecast_use_case,
        near_tie_accuracy_gap=config.forecast.near_tie_accuracy_gap,
        low_history_threshold=config.forecast.low_history_threshold,
    )

    forecast_engine = providers.Factory(
        ForecastEngine,
        series_builder=series_builder_use_case,
        validation_use_case=model_validation_use_case,
        forecast_use_case=forecast_use_case,
        comparison_use_case=model_comparison_use_case,
        ledger=resource_ledger,
        model_options=model_options,
        default_validation_split=config.forecast.default_validation_split,
    )


def create_container(settings: Optional[AppSettings] = None) -> AppContainer:
    """Build a new container; every container owns its own ledger."""

    container = AppContainer()
    container.config.from_pydantic(settings or get_settings())
    return container


def create_engine(
    settings: Optional[AppSettings] = None, setup_logging: bool = False
) -> ForecastEngine:
    """
    Build a ready-to-use engine backed by a fresh container.

    Args:
        settings: Engine settings; loaded from the environment when omitted
        setup_logging: Configure logging from ``settings.logging`` as well
    """
    settings = settings or get_settings()
    if setup_logging:
        update_logging_from_settings(settings)

    container = create_container(settings)
    logger.debug(
        "container.engine.created",
        environment=settings.environment.value,
        max_horizon=settings.forecast.max_horizon,
    )
    return container.forecast_engine()
