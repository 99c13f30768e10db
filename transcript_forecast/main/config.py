"""
Engine Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transcript_forecast.shared import EnumEnvironment, EnumLogLevel
from transcript_forecast.shared.consts import MINIMUM_HISTORY_POINTS


class ForecastSettings(BaseSettings):
    """Forecasting defaults and limits."""

    minimum_history_points: int = Field(
        default=MINIMUM_HISTORY_POINTS,
        ge=2,
        description="Shortest history a forecast is produced for",
    )
    default_validation_split: float = Field(
        default=0.2, gt=0.0, lt=1.0, description="Share of history held out"
    )
    default_polynomial_degree: int = Field(default=2, ge=2)
    max_polynomial_degree: int = Field(default=10, ge=2)
    max_horizon: int = Field(
        default=365, ge=1, description="Largest number of months per request"
    )
    default_confidence_level: float = Field(default=0.95, ge=0.5, le=0.99)
    max_autoregressive_order: int = Field(default=2, ge=1)
    max_condition_number: float = Field(
        default=1e10,
        gt=1.0,
        description="Least-squares designs above this condition number fail",
    )
    max_cv_folds: int = Field(default=5, ge=2)
    minimum_uncertainty_ratio: float = Field(
        default=0.05,
        ge=0.0,
        description="Interval sigma floor as a share of the history mean",
    )
    minimum_uncertainty: float = Field(
        default=1.0, ge=0.0, description="Absolute interval sigma floor"
    )
    near_tie_accuracy_gap: float = Field(
        default=5.0,
        ge=0.0,
        description="Accuracy gap under which the runner-up is also recommended",
    )
    low_history_threshold: int = Field(default=20, ge=0)
    outlier_iqr_multiplier: float = Field(default=1.5, gt=0.0)
    low_variance_threshold: float = Field(default=0.01, ge=0.0)
    stale_after_months: int = Field(default=2, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_", case_sensitive=False, extra="ignore"
    )

    @model_validator(mode="after")
    def _check_degrees(self) -> "ForecastSettings":
        if self.default_polynomial_degree > self.max_polynomial_degree:
            raise ValueError(
                "default_polynomial_degree must not exceed max_polynomial_degree"
            )
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main engine settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Engine environment"
    )

    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get engine settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()
