"""
Main Layer Package

Composition root of the engine: settings, the dependency container and the
engine facade.
"""

from .config import AppSettings, ForecastSettings, LoggingSettings, get_settings
from .container import AppContainer, create_container, create_engine
from .engine import ForecastEngine

__all__ = [
    "AppContainer",
    "AppSettings",
    "ForecastEngine",
    "ForecastSettings",
    "LoggingSettings",
    "create_container",
    "create_engine",
    "get_settings",
]
