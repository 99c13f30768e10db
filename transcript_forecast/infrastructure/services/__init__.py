"""Infrastructure services package."""

from .resource_ledger import NumericResourceLedger, ResourceScope

__all__ = ["NumericResourceLedger", "ResourceScope"]
