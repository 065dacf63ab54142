"""Fallback adapter for CSV files from unknown apps, matched by loose header names."""
from __future__ import annotations

from typing import Sequence

from liftlog_importer.parsers.csv_parser import CSVDialect, find_column_containing
from liftlog_importer.utils import ISO_FORMATS, STRONG_DATE_FORMAT, parse_datetime
from .csv_base import CSVColumns, CSVRowAdapter, RowIdentity, now
from . import register_adapter

GENERIC_WORKOUT_NAME = "Imported Workout"
GENERIC_DATE_FORMATS = ISO_FORMATS + (STRONG_DATE_FORMAT, "%Y-%m-%d %H:%M", "%Y-%m-%d")


class GenericCSVAdapter(CSVRowAdapter):
    """Rows are grouped by the raw date string alone."""

    @staticmethod
    def source_name() -> str:
        return CSVDialect.GENERIC.value

    def resolve_columns(self, headers: Sequence[str]) -> CSVColumns:
        return CSVColumns(
            date=find_column_containing(headers, "date", default=0),
            exercise=find_column_containing(headers, "exercise", default=1),
            weight=find_column_containing(headers, "weight", default=2),
            reps=find_column_containing(headers, "rep", default=3),
        )

    def identify(self, row: Sequence[str], columns: CSVColumns) -> RowIdentity:
        raw_date = row[columns.date]
        started = parse_datetime(raw_date, GENERIC_DATE_FORMATS)
        return RowIdentity(
            name=GENERIC_WORKOUT_NAME,
            date=started or now(),
            start_time=None,
            key=(raw_date,),
        )


register_adapter(GenericCSVAdapter)
