"""
Reconciliation engine.

Merges freshly extracted workouts that share an import identity key, then
hands the merged batch to the store writer in one submission.
"""

import logging
from typing import Dict, List, Optional, Sequence

from liftlog_importer.models import Exercise, ImportResult, Workout
from liftlog_importer.services.store import StoreWriter

logger = logging.getLogger(__name__)


def merge_workouts(workouts: Sequence[Workout]) -> List[Workout]:
    """
    Group workouts by ``import_key`` in first-seen order.

    Within a group, exercises are matched by exact name. The first occurrence
    of a name creates the exercise; later occurrences append their sets, each
    numbered after the sets already present. Workouts without a key are kept
    as they are.
    """
    merged: List[Workout] = []
    by_key: Dict[tuple, Workout] = {}

    for workout in workouts:
        key = workout.import_key
        if key is None:
            merged.append(workout)
            continue

        target = by_key.get(key)
        if target is None:
            target = workout.model_copy(update={"exercises": []})
            by_key[key] = target
            merged.append(target)

        for exercise in workout.sorted_exercises:
            _merge_exercise(target, exercise)

    return merged


def _merge_exercise(target: Workout, incoming: Exercise) -> None:
    existing = _find_exercise(target, incoming.name)
    if existing is None:
        target.add_exercise(incoming.model_copy(update={"sets": list(incoming.sorted_sets)}))
        return

    for workout_set in incoming.sorted_sets:
        existing.add_set(workout_set)


def _find_exercise(workout: Workout, name: str) -> Optional[Exercise]:
    for exercise in workout.exercises:
        if exercise.name == name:
            return exercise
    return None


class ReconciliationEngine:
    """Merge extracted workouts and commit them through the single store writer."""

    def __init__(self, writer: StoreWriter):
        self.writer = writer

    def merge(self, workouts: Sequence[Workout]) -> List[Workout]:
        return merge_workouts(workouts)

    async def reconcile(self, workouts: Sequence[Workout], errors: Sequence[str] = ()) -> ImportResult:
        merged = self.merge(workouts)
        if merged:
            await self.writer.submit(merged)

        result = ImportResult(
            workouts_imported=len(merged),
            exercises_imported=sum(len(w.exercises) for w in merged),
            errors=list(errors),
        )
        logger.info(
            f"Reconciled {len(workouts)} extracted workouts into {result.workouts_imported} "
            f"({result.exercises_imported} exercises, {len(result.errors)} errors)"
        )
        return result
