"""
Application Use Cases - Series Builder

This module turns raw transcript records into the canonical monthly series
of one client. It validates every record, filters to the requested client,
resolves duplicate months and records the months missing from the history.
"""

from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
import structlog
from pydantic import ValidationError

from transcript_forecast.application.dtos.record_dto import TranscriptRecordDTO
from transcript_forecast.domain.entities.errors import InvalidRecordError
from transcript_forecast.domain.entities.time_series import (
    TimeSeries,
    TimeSeriesPoint,
    format_month,
    parse_month,
)

logger = structlog.get_logger(__name__)

RawRecord = Union[TranscriptRecordDTO, Mapping[str, Any]]


def normalise_entity(name: str) -> str:
    """Key used to match client names: trimmed and case-folded."""
    return name.strip().casefold()


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class SeriesBuilderUseCase:
    """
    Builds a TimeSeries for one client:
      - Validates each raw record against the input contract
      - Keeps the records of the requested client
      - Sorts by month and keeps the most recently updated duplicate
      - Lists the months missing between first and last observation
    """

    def build(self, records: Iterable[RawRecord], entity_id: str) -> TimeSeries:
        """
        Build the monthly series of ``entity_id``.

        Args:
            records: Raw records as mappings (camelCase or snake_case keys)
                or TranscriptRecordDTO instances
            entity_id: Client name to filter on

        Returns:
            The chronologically ordered series, possibly empty

        Raises:
            InvalidRecordError: When a record does not match the contract
            MalformedPeriodError: When a record of the client has a bad month
        """
        target = normalise_entity(entity_id)
        parsed = [
            self._parse_record(record, position)
            for position, record in enumerate(records)
        ]

        rows = [
            {
                "month": pd.Timestamp(parse_month(record.month)),
                "value": record.transcript_count,
                "updated_at": _as_utc(record.updated_at),
                "position": position,
            }
            for position, record in enumerate(parsed)
            if normalise_entity(record.client_name) == target
        ]

        logger.debug(
            "series.records_filtered",
            entity_id=entity_id,
            total_records=len(parsed),
            matched_records=len(rows),
        )

        if not rows:
            return TimeSeries(entity_id=entity_id.strip())

        df = self._convert_to_dataframe(rows, entity_id)
        gaps = self._missing_months(df, entity_id)

        points = tuple(
            TimeSeriesPoint(timestamp=month.date(), value=int(value))
            for month, value in zip(df["month"], df["value"])
        )
        return TimeSeries(entity_id=entity_id.strip(), points=points, gaps=gaps)

    def _parse_record(self, record: RawRecord, position: int) -> TranscriptRecordDTO:
        if isinstance(record, TranscriptRecordDTO):
            return record
        if not isinstance(record, Mapping):
            raise InvalidRecordError(
                f"Record {position} must be a mapping, got {type(record).__name__}",
                {"position": position},
            )
        try:
            return TranscriptRecordDTO.model_validate(dict(record))
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
            raise InvalidRecordError(
                f"Record {position} is invalid: {'; '.join(errors)}",
                {"position": position, "errors": errors},
            ) from exc

    def _convert_to_dataframe(
        self, rows: List[Mapping[str, Any]], entity_id: str
    ) -> pd.DataFrame:
        """Sort by month and drop duplicate months, keeping the latest update."""

        df = pd.DataFrame(rows)
        df["updated_at"] = pd.to_datetime(df["updated_at"], utc=True)

        # Records without updatedAt sort first so any timestamped record wins;
        # equal timestamps fall back to input order.
        df = df.sort_values(["month", "updated_at", "position"], na_position="first")

        duplicates = int(df.duplicated(subset=["month"]).sum())
        if duplicates > 0:
            collided = df.duplicated(subset=["month"], keep=False)
            duplicated_months = sorted(
                {format_month(month.date()) for month in df.loc[collided, "month"]}
            )
            df = df.drop_duplicates(subset=["month"], keep="last")
            logger.warning(
                "series.duplicates_resolved",
                entity_id=entity_id,
                duplicate_count=duplicates,
                months=duplicated_months,
            )

        df.reset_index(drop=True, inplace=True)
        return df

    def _missing_months(self, df: pd.DataFrame, entity_id: str) -> Tuple[date, ...]:
        expected = pd.date_range(df["month"].min(), df["month"].max(), freq="MS")
        missing = expected.difference(pd.DatetimeIndex(df["month"]))
        gaps = tuple(month.date() for month in missing)
        if gaps:
            logger.warning(
                "series.gaps_detected",
                entity_id=entity_id,
                missing_months=[format_month(gap) for gap in gaps],
            )
        return gaps
