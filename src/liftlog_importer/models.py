"""
Workout Models

Pydantic models for the canonical Workout -> Exercise -> WorkoutSet aggregate
that every import source is converted into.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from liftlog_importer.utils import as_utc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MuscleGroup(str, Enum):
    """Muscle groups for categorizing exercises"""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    FULL_BODY = "full_body"
    CARDIO = "cardio"
    OTHER = "other"


class EquipmentType(str, Enum):
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    BODYWEIGHT = "bodyweight"
    KETTLEBELL = "kettlebell"
    RESISTANCE_BAND = "resistance_band"
    SMITH_MACHINE = "smith_machine"
    EZ_BAR = "ez_bar"
    TRAP_BAR = "trap_bar"
    OTHER = "other"


class SetType(str, Enum):
    WORKING = "working"
    WARMUP = "warmup"
    DROPSET = "dropset"
    FAILURE = "failure"
    AMRAP = "amrap"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "SetType":
        """Map a free-form set label ("Warmup", "to failure", "normal") to a SetType.

        Unknown or missing labels are working sets.
        """
        if not label:
            return cls.WORKING
        key = label.strip().lower().replace(" ", "").replace("-", "").replace("_", "")
        return _SET_TYPE_ALIASES.get(key, cls.WORKING)


_SET_TYPE_ALIASES = {
    "working": SetType.WORKING,
    "normal": SetType.WORKING,
    "warmup": SetType.WARMUP,
    "dropset": SetType.DROPSET,
    "drop": SetType.DROPSET,
    "failure": SetType.FAILURE,
    "tofailure": SetType.FAILURE,
    "amrap": SetType.AMRAP,
}


class WorkoutSet(BaseModel):
    """A single set within an exercise. Weight is in pounds, 0 means bodyweight."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    order: int = Field(default=0, ge=0)
    weight: float = Field(default=0, ge=0, description="Weight in lbs (0 = bodyweight)")
    reps: int = Field(default=0, ge=0)
    set_type: SetType = SetType.WORKING
    is_completed: bool = False
    rpe: Optional[float] = Field(default=None, ge=1, le=10)
    duration: Optional[float] = Field(default=None, description="Seconds")
    distance: Optional[float] = Field(default=None, description="Meters")
    calories: Optional[float] = Field(default=None, description="Kilocalories")
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    @property
    def formatted_weight(self) -> str:
        if self.weight == 0:
            return "BW"
        if float(self.weight).is_integer():
            return f"{int(self.weight)} lbs"
        return f"{self.weight:.1f} lbs"


class Exercise(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    primary_muscle: MuscleGroup = MuscleGroup.OTHER
    equipment: EquipmentType = EquipmentType.BARBELL
    order: int = Field(default=0, ge=0)
    notes: Optional[str] = None
    sets: List[WorkoutSet] = Field(default_factory=list)

    @property
    def sorted_sets(self) -> List[WorkoutSet]:
        return sorted(self.sets, key=lambda s: s.order)

    @property
    def total_volume(self) -> float:
        return sum(s.volume for s in self.sets)

    def add_set(self, workout_set: WorkoutSet) -> WorkoutSet:
        """Append a set, numbering it after the sets already present."""
        workout_set.order = len(self.sets)
        self.sets.append(workout_set)
        return workout_set


class Workout(BaseModel):
    """A workout session and the exercises it owns."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    date: datetime = Field(default_factory=_utcnow)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    notes: Optional[str] = None
    exercises: List[Exercise] = Field(default_factory=list)

    # Reconciliation key for the current import run; never serialized.
    import_key: Optional[tuple] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _check_time_range(self) -> "Workout":
        if self.start_time and self.end_time and as_utc(self.end_time) < as_utc(self.start_time):
            raise ValueError("end_time must not be earlier than start_time")
        return self

    @property
    def duration(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return (as_utc(self.end_time) - as_utc(self.start_time)).total_seconds()

    @property
    def sorted_exercises(self) -> List[Exercise]:
        return sorted(self.exercises, key=lambda e: e.order)

    @property
    def total_volume(self) -> float:
        return sum(e.total_volume for e in self.exercises)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    @property
    def muscle_groups_worked(self) -> List[MuscleGroup]:
        seen: List[MuscleGroup] = []
        for exercise in self.sorted_exercises:
            if exercise.primary_muscle not in seen:
                seen.append(exercise.primary_muscle)
        return seen

    def add_exercise(self, exercise: Exercise) -> Exercise:
        exercise.order = len(self.exercises)
        self.exercises.append(exercise)
        return exercise

    @staticmethod
    def default_name(when: Optional[datetime] = None) -> str:
        """Name a workout after the time of day it started."""
        hour = (when or datetime.now()).hour
        if 5 <= hour < 12:
            period = "Morning"
        elif 12 <= hour < 17:
            period = "Afternoon"
        elif 17 <= hour < 21:
            period = "Evening"
        else:
            period = "Night"
        return f"{period} Workout"


class ImportResult(BaseModel):
    """Summary returned to the caller after an import."""
    workouts_imported: int = 0
    exercises_imported: int = 0
    errors: List[str] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return len(self.errors) == 0
