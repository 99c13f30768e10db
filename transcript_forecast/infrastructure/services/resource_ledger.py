"""
Numeric resource ledger.

Keeps a registry of the numpy buffers allocated while training and scoring
models. Every buffer belongs to a scope; leaving the scope (normally or via an
exception) drops the ledger's references so nothing outlives the call. The
ledger is shared by all calls of an engine and guarded by a single lock.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Sequence, Tuple, Union

import numpy as np
import structlog

from transcript_forecast.domain.entities.metrics import MemoryUsage

logger = structlog.get_logger(__name__)


class ResourceScope:
    """Handle for registering buffers that must be released together."""

    def __init__(self, ledger: "NumericResourceLedger", scope_id: int, label: str):
        self._ledger = ledger
        self.scope_id = scope_id
        self.label = label

    def track(self, array: np.ndarray) -> np.ndarray:
        """Register an existing array and return it unchanged."""
        self._ledger._register(self.scope_id, array)
        return array

    def allocate(
        self, shape: Union[int, Sequence[int]], dtype: type = np.float64
    ) -> np.ndarray:
        """Allocate a zero-filled buffer owned by this scope."""
        return self.track(np.zeros(shape, dtype=dtype))


class NumericResourceLedger:
    """Thread-safe allocation ledger with scoped release."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._scope_ids = itertools.count(1)
        self._buffers: Dict[int, Dict[int, Tuple[np.ndarray, int]]] = {}

    @contextmanager
    def scope(self, label: str = "call") -> Iterator[ResourceScope]:
        with self._lock:
            scope_id = next(self._scope_ids)
            self._buffers[scope_id] = {}
        try:
            yield ResourceScope(self, scope_id, label)
        finally:
            released = self._release(scope_id)
            logger.debug(
                "resources.scope_released",
                scope=label,
                scope_id=scope_id,
                buffers=released.num_buffers,
                bytes=released.num_bytes,
            )

    def memory_usage(self) -> MemoryUsage:
        """Outstanding buffers across every open scope."""
        with self._lock:
            entries = [
                size for owned in self._buffers.values() for _, size in owned.values()
            ]
        return MemoryUsage(num_buffers=len(entries), num_bytes=sum(entries))

    def _register(self, scope_id: int, array: np.ndarray) -> None:
        with self._lock:
            owned = self._buffers.get(scope_id)
            if owned is None:
                raise RuntimeError(f"Resource scope {scope_id} is already closed")
            owned[id(array)] = (array, int(array.nbytes))

    def _release(self, scope_id: int) -> MemoryUsage:
        with self._lock:
            owned = self._buffers.pop(scope_id, {})
        return MemoryUsage(
            num_buffers=len(owned),
            num_bytes=sum(size for _, size in owned.values()),
        )
