"""Hevy CSV export adapter (dialect A). Weights are exported in kilograms."""
from __future__ import annotations

from typing import Sequence

from liftlog_importer.parsers.csv_parser import CSVDialect, find_column
from liftlog_importer.services.heuristics import kg_to_lb
from liftlog_importer.utils import ISO_FORMATS, parse_datetime, to_float
from .csv_base import CSVColumns, CSVRowAdapter, RowIdentity, now
from . import register_adapter

# Hevy's own export writes e.g. "20 Jan 2024, 10:00"
HEVY_EXPORT_FORMATS = ISO_FORMATS + ("%d %b %Y, %H:%M",)


class HevyCSVAdapter(CSVRowAdapter):
    """Rows keyed by (title, raw start_time)."""

    @staticmethod
    def source_name() -> str:
        return CSVDialect.HEVY.value

    def resolve_columns(self, headers: Sequence[str]) -> CSVColumns:
        return CSVColumns(
            title=find_column(headers, "title", default=0),
            date=find_column(headers, "start_time", default=1),
            exercise=find_column(headers, "exercise_title", "Exercise Name", default=4),
            weight=find_column(headers, "weight_kg", "Weight", default=6),
            reps=find_column(headers, "reps", "Reps", default=7),
        )

    def identify(self, row: Sequence[str], columns: CSVColumns) -> RowIdentity:
        title = row[columns.title]
        raw_start = row[columns.date]
        started = parse_datetime(raw_start, HEVY_EXPORT_FORMATS)
        return RowIdentity(
            name=title,
            date=started or now(),
            start_time=started,
            key=(title, raw_start),
        )

    def weight_in_pounds(self, raw: str) -> float:
        return kg_to_lb(to_float(raw))


register_adapter(HevyCSVAdapter)
