"""Shared row handling for the CSV dialect adapters."""
from __future__ import annotations

import logging
from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import ValidationError

from liftlog_importer.models import EquipmentType, Exercise, MuscleGroup, SetType, Workout, WorkoutSet
from liftlog_importer.utils import to_float, to_int
from .base import SourceAdapter

logger = logging.getLogger(__name__)


@dataclass
class CSVColumns:
    """Resolved column indices for one file. ``title``/``start`` are unused by some dialects."""
    date: int
    exercise: int
    weight: int
    reps: int
    title: Optional[int] = None

    @property
    def required_length(self) -> int:
        used = [self.date, self.exercise, self.weight, self.reps]
        if self.title is not None:
            used.append(self.title)
        return max(used) + 1


@dataclass
class RowIdentity:
    name: str
    date: datetime
    start_time: Optional[datetime]
    key: tuple


class CSVRowAdapter(SourceAdapter):
    """
    Turns tokenized CSV rows (header first) into one single-set Workout per row.

    Rows sharing an identity key are merged later by the reconciliation
    engine. Rows shorter than the highest column index in use are skipped.
    """

    @abstractmethod
    def resolve_columns(self, headers: Sequence[str]) -> CSVColumns:
        ...

    @abstractmethod
    def identify(self, row: Sequence[str], columns: CSVColumns) -> RowIdentity:
        ...

    def weight_in_pounds(self, raw: str) -> float:
        return to_float(raw)

    def extract(self, raw_batch: Sequence[Sequence[str]]) -> List[Workout]:
        if not raw_batch:
            return []

        headers = list(raw_batch[0])
        columns = self.resolve_columns(headers)
        workouts: List[Workout] = []
        skipped = 0

        for line_no, row in enumerate(raw_batch[1:], start=2):
            if len(row) < columns.required_length:
                skipped += 1
                logger.debug(f"{self.source_name()}: skipping short row {line_no} ({len(row)} fields)")
                continue

            try:
                workouts.append(self._build_workout(row, columns))
            except ValidationError as e:
                skipped += 1
                logger.debug(f"{self.source_name()}: skipping invalid row {line_no}: {e}")

        if skipped:
            logger.info(f"{self.source_name()}: skipped {skipped} malformed rows")
        return workouts

    def _build_workout(self, row: Sequence[str], columns: CSVColumns) -> Workout:
        identity = self.identify(row, columns)
        workout_set = WorkoutSet(
            order=0,
            weight=max(self.weight_in_pounds(row[columns.weight]), 0.0),
            reps=max(to_int(row[columns.reps]), 0),
            set_type=SetType.WORKING,
            is_completed=True,
        )
        exercise = Exercise(
            name=row[columns.exercise],
            primary_muscle=MuscleGroup.OTHER,
            equipment=EquipmentType.BARBELL,
            order=0,
            sets=[workout_set],
        )
        return Workout(
            name=identity.name,
            date=identity.date,
            start_time=identity.start_time,
            exercises=[exercise],
            import_key=identity.key,
        )


def now() -> datetime:
    return datetime.now(timezone.utc)
