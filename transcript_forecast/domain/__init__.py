"""
Domain Layer Package

This package contains the core forecasting rules of the engine.
It defines entities, ports and services without dependencies on
composition or infrastructure concerns.
"""

# Re-export submodules
from transcript_forecast.domain import entities, ports, services

__all__ = ["entities", "ports", "services"]
