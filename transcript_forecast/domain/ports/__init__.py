"""Domain ports package."""

from .forecasting_model import IForecastingModel, IModelRegistry
from .resource_ledger import IResourceLedger, IResourceScope

__all__ = ["IForecastingModel", "IModelRegistry", "IResourceLedger", "IResourceScope"]
