"""Hevy API adapter: converts decoded /workouts records into Workout aggregates."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from pydantic import ValidationError

from liftlog_importer.models import EquipmentType, Exercise, SetType, Workout, WorkoutSet
from liftlog_importer.services.heuristics import guess_muscle_group, kg_to_lb
from liftlog_importer.services.hevy_models import HevyExercise, HevySet, HevyWorkout
from liftlog_importer.utils import parse_iso_datetime
from .base import AdapterConversionError, SourceAdapter
from . import register_adapter

logger = logging.getLogger(__name__)

# Hevy set types that map onto our own; "normal" and anything unknown are working sets
_HEVY_SET_TYPES = {
    "warmup": SetType.WARMUP,
    "dropset": SetType.DROPSET,
    "failure": SetType.FAILURE,
}


class HevyAPIAdapter(SourceAdapter):
    """Records are keyed by (title, raw start_time)."""

    @staticmethod
    def source_name() -> str:
        return "hevy_api"

    def extract(self, raw_batch: Sequence[HevyWorkout]) -> List[Workout]:
        return [self.convert(record) for record in raw_batch]

    def convert(self, record: HevyWorkout) -> Workout:
        """Convert one API workout.

        Raises:
            AdapterConversionError: If the record cannot form a valid Workout.
        """
        start = parse_iso_datetime(record.start_time)
        end = parse_iso_datetime(record.end_time)

        try:
            workout = Workout(
                name=record.title,
                date=start or datetime.now(timezone.utc),
                start_time=start,
                end_time=end,
                notes=record.description,
                exercises=[self._convert_exercise(e, i) for i, e in enumerate(record.exercises)],
                import_key=(record.title, record.start_time),
            )
        except (ValidationError, TypeError) as e:
            logger.warning(f"Could not convert Hevy workout {record.id}: {e}")
            raise AdapterConversionError(f"Failed to import workout: {record.title}") from e

        return workout

    def _convert_exercise(self, exercise: HevyExercise, order: int) -> Exercise:
        return Exercise(
            name=exercise.title,
            primary_muscle=guess_muscle_group(exercise.title),
            equipment=EquipmentType.BARBELL,
            order=order,
            notes=exercise.notes,
            sets=[self._convert_set(s, i) for i, s in enumerate(exercise.sets)],
        )

    def _convert_set(self, hevy_set: HevySet, order: int) -> WorkoutSet:
        return WorkoutSet(
            order=order,
            weight=kg_to_lb(hevy_set.weight_kg or 0),
            reps=hevy_set.reps or 0,
            set_type=_HEVY_SET_TYPES.get((hevy_set.type or "").lower(), SetType.WORKING),
            is_completed=True,
            rpe=hevy_set.rpe,
            duration=hevy_set.duration_seconds,
            distance=hevy_set.distance_meters,
        )


register_adapter(HevyAPIAdapter)
