"""Cooperative cancellation for long-running forecast calls."""

from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    """Thread-safe flag checked by the engine between units of work.

    The caller keeps a reference and calls :meth:`cancel`; the engine calls
    :meth:`raise_if_cancelled` at its checkpoints.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self, checkpoint: str) -> None:
        if not self._event.is_set():
            return
        # Imported here: the domain layer depends on shared, not the reverse.
        from transcript_forecast.domain.entities.errors import ForecastCancelledError

        raise ForecastCancelledError(checkpoint=checkpoint, reason=self._reason)
