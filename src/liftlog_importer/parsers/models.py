"""
Parser Models

Pydantic models for the parsed-workout shape produced by the natural-language
extractor, both from the language model's JSON and from the regex fallback.
Field names follow the JSON the model is asked to return.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class ParsedSet(BaseModel):
    """One set as described in free text. ``weight=None`` means bodyweight."""
    weight: Optional[float] = Field(default=None, ge=0)
    reps: int = Field(..., ge=0)
    set_type: Optional[str] = Field(default=None, alias="setType")

    class Config:
        populate_by_name = True


class ParsedExercise(BaseModel):
    name: str
    sets: List[ParsedSet] = Field(default_factory=list)
    notes: Optional[str] = None


class ParsedWorkoutData(BaseModel):
    """Normalized output of the natural-language extractor"""
    exercises: List[ParsedExercise] = Field(default_factory=list)
    workout_name: Optional[str] = Field(default=None, alias="workoutName")
    notes: Optional[str] = None

    class Config:
        populate_by_name = True
