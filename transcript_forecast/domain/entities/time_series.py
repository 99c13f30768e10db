"""Domain entities for monthly transcript-volume series."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterator, List, Tuple

from transcript_forecast.shared.consts import MONTH_LABEL_FORMAT

from .errors import MalformedPeriodError

_MONTH_LABEL = re.compile(r"\d{4}-(0[1-9]|1[0-2])")


def month_offset(origin: date, month: date) -> int:
    """Number of whole months from ``origin`` to ``month``."""
    return (month.year - origin.year) * 12 + (month.month - origin.month)


def add_months(month: date, periods: int) -> date:
    """Return the first day of the month ``periods`` months after ``month``."""
    total = month.year * 12 + (month.month - 1) + periods
    return date(total // 12, total % 12 + 1, 1)


def format_month(month: date) -> str:
    return month.strftime(MONTH_LABEL_FORMAT)


def parse_month(label: Any) -> date:
    """Parse a ``YYYY-MM`` label into the first day of that month.

    Raises:
        MalformedPeriodError: If ``label`` is not a zero-padded year-month.
    """
    if not isinstance(label, str) or _MONTH_LABEL.fullmatch(label) is None:
        raise MalformedPeriodError(label)
    year, month = label.split("-")
    if int(year) < 1:
        raise MalformedPeriodError(label)
    return date(int(year), int(month), 1)


@dataclass(frozen=True, slots=True)
class TimeSeriesPoint:
    """One observed month for an entity."""

    timestamp: date
    value: int


@dataclass(frozen=True, slots=True)
class TimeSeries:
    """Chronologically ordered, de-duplicated monthly series for one entity.

    ``gaps`` lists the months missing between the first and last observation.
    """

    entity_id: str
    points: Tuple[TimeSeriesPoint, ...] = ()
    gaps: Tuple[date, ...] = field(default=())

    def __post_init__(self) -> None:
        for previous, current in zip(self.points, self.points[1:]):
            if current.timestamp <= previous.timestamp:
                raise ValueError(
                    "Time series timestamps must be strictly increasing"
                )

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimeSeriesPoint]:
        return iter(self.points)

    @property
    def values(self) -> List[float]:
        return [float(point.value) for point in self.points]

    @property
    def timestamps(self) -> List[date]:
        return [point.timestamp for point in self.points]

    @property
    def origin(self) -> date:
        if not self.points:
            raise ValueError("Empty time series has no origin")
        return self.points[0].timestamp

    def period_indices(self) -> List[int]:
        """Zero-based month offsets of every point from the first month."""
        if not self.points:
            return []
        origin = self.origin
        return [month_offset(origin, point.timestamp) for point in self.points]

    def head(self, count: int) -> "TimeSeries":
        """Leading ``count`` points as a new series."""
        return self._slice(self.points[:count])

    def tail(self, count: int) -> "TimeSeries":
        """Trailing ``count`` points as a new series."""
        if count <= 0:
            return self._slice(())
        return self._slice(self.points[-count:])

    def _slice(self, points: Tuple[TimeSeriesPoint, ...]) -> "TimeSeries":
        if not points:
            return TimeSeries(entity_id=self.entity_id)
        first, last = points[0].timestamp, points[-1].timestamp
        gaps = tuple(gap for gap in self.gaps if first < gap < last)
        return TimeSeries(entity_id=self.entity_id, points=points, gaps=gaps)
