"""Health platform adapter: one workout with a single summary set per sample."""
from __future__ import annotations

from typing import List, Sequence

from liftlog_importer.models import EquipmentType, Exercise, SetType, Workout, WorkoutSet
from liftlog_importer.services.health_service import HealthWorkoutSample
from liftlog_importer.services.heuristics import activity_muscle_group, activity_name
from .base import SourceAdapter
from . import register_adapter

HEALTH_IMPORT_NOTE = "Imported from Apple Health"


class HealthAdapter(SourceAdapter):
    """Health samples carry no identity key and are never merged."""

    @staticmethod
    def source_name() -> str:
        return "health"

    def extract(self, raw_batch: Sequence[HealthWorkoutSample]) -> List[Workout]:
        return [self.convert(sample) for sample in raw_batch]

    def convert(self, sample: HealthWorkoutSample) -> Workout:
        name = activity_name(sample.activity_type)
        summary = WorkoutSet(
            order=0,
            weight=0,
            reps=0,
            set_type=SetType.WORKING,
            is_completed=True,
            duration=sample.duration,
            calories=sample.total_energy_burned,
            distance=sample.total_distance,
        )
        exercise = Exercise(
            name=name,
            primary_muscle=activity_muscle_group(sample.activity_type),
            equipment=EquipmentType.OTHER,
            order=0,
            sets=[summary],
        )
        return Workout(
            name=name,
            date=sample.start_date,
            start_time=sample.start_date,
            end_time=sample.end_date,
            notes=HEALTH_IMPORT_NOTE,
            exercises=[exercise],
        )


register_adapter(HealthAdapter)
