"""Strong App CSV export adapter (dialect B). Weights are already in pounds."""
from __future__ import annotations

from typing import Sequence

from liftlog_importer.parsers.csv_parser import CSVDialect, find_column_ci
from liftlog_importer.utils import STRONG_DATE_FORMAT, parse_datetime
from .csv_base import CSVColumns, CSVRowAdapter, RowIdentity, now
from . import register_adapter


class StrongCSVAdapter(CSVRowAdapter):

    @staticmethod
    def source_name() -> str:
        return CSVDialect.STRONG.value

    def resolve_columns(self, headers: Sequence[str]) -> CSVColumns:
        return CSVColumns(
            date=find_column_ci(headers, "date", default=0),
            title=find_column_ci(headers, "workout name", default=1),
            exercise=find_column_ci(headers, "exercise name", default=2),
            weight=find_column_ci(headers, "weight", default=4),
            reps=find_column_ci(headers, "reps", default=5),
        )

    def identify(self, row: Sequence[str], columns: CSVColumns) -> RowIdentity:
        title = row[columns.title]
        raw_date = row[columns.date]
        started = parse_datetime(raw_date, (STRONG_DATE_FORMAT,))
        return RowIdentity(
            name=title,
            date=started or now(),
            start_time=started,
            key=(title, raw_date),
        )


register_adapter(StrongCSVAdapter)
