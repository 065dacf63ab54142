"""Pydantic models for the Hevy API ``GET /workouts`` response."""
from typing import List, Optional

from pydantic import BaseModel, Field


class HevySet(BaseModel):
    index: int = 0
    type: Optional[str] = None
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    distance_meters: Optional[float] = None
    duration_seconds: Optional[float] = None
    rpe: Optional[float] = None


class HevyExercise(BaseModel):
    index: int = 0
    title: str
    notes: Optional[str] = None
    sets: List[HevySet] = Field(default_factory=list)


class HevyWorkout(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    exercises: List[HevyExercise] = Field(default_factory=list)


class HevyPageResponse(BaseModel):
    page: int
    page_count: int
    workouts: List[HevyWorkout] = Field(default_factory=list)
