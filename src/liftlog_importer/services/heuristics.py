"""
Unit and muscle-group heuristics shared by every import source.

All functions here are pure.
"""

from typing import Dict, List, Tuple

from liftlog_importer.models import MuscleGroup

KG_TO_LB = 2.20462


def kg_to_lb(kilograms: float) -> float:
    return kilograms * KG_TO_LB


def lb_to_kg(pounds: float) -> float:
    return pounds / KG_TO_LB


# Checked in this order; the first group with a matching keyword wins.
# "press" is in the shoulder list, but "bench press" hits chest first.
MUSCLE_KEYWORDS: List[Tuple[MuscleGroup, Tuple[str, ...]]] = [
    (MuscleGroup.CHEST, ("bench", "chest", "fly", "push")),
    (MuscleGroup.BACK, ("row", "pull", "lat", "back")),
    (MuscleGroup.SHOULDERS, ("shoulder", "press", "lateral", "delt")),
    (MuscleGroup.BICEPS, ("bicep", "curl")),
    (MuscleGroup.TRICEPS, ("tricep", "pushdown", "skull")),
    (MuscleGroup.QUADRICEPS, ("squat", "leg press", "quad", "lunge")),
    (MuscleGroup.HAMSTRINGS, ("deadlift", "hamstring", "rdl")),
    (MuscleGroup.CALVES, ("calf", "calves")),
    (MuscleGroup.GLUTES, ("glute", "hip thrust")),
    (MuscleGroup.CORE, ("ab", "crunch", "plank", "core")),
    (MuscleGroup.CARDIO, ("run", "bike", "cardio", "stair", "treadmill")),
]


def guess_muscle_group(exercise_name: str) -> MuscleGroup:
    """Guess the primary muscle group from an exercise name by keyword."""
    name = exercise_name.lower()
    for group, keywords in MUSCLE_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return group
    return MuscleGroup.OTHER


# Health-platform activity types

STRENGTH_ACTIVITIES = ("traditional_strength_training", "functional_strength_training")
CARDIO_ACTIVITIES = (
    "running",
    "cycling",
    "rowing",
    "stair_climbing",
    "swimming",
    "elliptical",
    "mixed_cardio",
)
CORE_ACTIVITIES = ("yoga", "pilates")

ACTIVITY_NAMES: Dict[str, str] = {
    "traditional_strength_training": "Strength Training",
    "functional_strength_training": "Functional Training",
    "running": "Running",
    "cycling": "Cycling",
    "rowing": "Rowing",
    "stair_climbing": "Stair Climbing",
    "high_intensity_interval_training": "HIIT",
    "cross_training": "Cross Training",
    "mixed_cardio": "Cardio",
    "walking": "Walking",
    "swimming": "Swimming",
    "yoga": "Yoga",
    "pilates": "Pilates",
    "elliptical": "Elliptical",
}


def activity_name(activity_type: str) -> str:
    """Display name for a health-platform activity type."""
    return ACTIVITY_NAMES.get(activity_type, "Workout")


def activity_muscle_group(activity_type: str) -> MuscleGroup:
    if activity_type in STRENGTH_ACTIVITIES:
        return MuscleGroup.FULL_BODY
    if activity_type in CARDIO_ACTIVITIES:
        return MuscleGroup.CARDIO
    if activity_type in CORE_ACTIVITIES:
        return MuscleGroup.CORE
    return MuscleGroup.OTHER
