"""Domain port for tracking heavyweight numeric allocations."""

from __future__ import annotations

from typing import ContextManager, Protocol, Sequence, Union

import numpy as np

from transcript_forecast.domain.entities.metrics import MemoryUsage


class IResourceScope(Protocol):
    """Buffers registered here are released when the scope exits."""

    def track(self, array: np.ndarray) -> np.ndarray:
        ...

    def allocate(
        self, shape: Union[int, Sequence[int]], dtype: type = np.float64
    ) -> np.ndarray:
        ...


class IResourceLedger(Protocol):
    """Ledger of outstanding numeric buffers shared across engine calls."""

    def scope(self, label: str = "call") -> ContextManager[IResourceScope]:
        ...

    def memory_usage(self) -> MemoryUsage:
        ...
