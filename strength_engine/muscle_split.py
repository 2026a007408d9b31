"""Per-session training volume broken down by muscle group."""

from __future__ import annotations

from typing import Dict, List

from strength_engine.constants import MUSCLE_SPLIT_ROLLUP, SPLIT_EXCLUDED_MUSCLE_GROUPS
from strength_engine.models import Session, WorkoutExercise
from strength_engine.standards import DEFAULT_CATALOG, ExerciseStandardsCatalog


def exercise_volume(exercise: WorkoutExercise) -> float:
    """Sum of reps x weight over working sets; bodyweight sets add nothing."""
    return sum(
        s.reps * s.weight
        for s in exercise.sets
        if s.is_usable and s.is_weighted
    )


def _split_from_volumes(volumes: Dict[str, float]) -> List[dict]:
    total = sum(volumes.values())
    split = [
        {
            'muscle_group': group,
            'volume': volume,
            'percentage': (volume / total) * 100 if total > 0 else 0.0,
        }
        for group, volume in volumes.items()
    ]
    # sorted() is stable so equal shares keep first-seen order
    return sorted(split, key=lambda row: row['percentage'], reverse=True)


def calculate_muscle_split(
    session: Session,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> List[dict]:
    if session is None or not session.exercises:
        return []

    volumes: Dict[str, float] = {}
    for exercise in session.exercises:
        group = exercise.muscle_group or catalog.muscle_group(exercise.exercise_name)
        if not group or group in SPLIT_EXCLUDED_MUSCLE_GROUPS:
            continue
        volumes[group] = volumes.get(group, 0.0) + exercise_volume(exercise)
    return _split_from_volumes(volumes)


def calculate_muscle_split_grouped(
    session: Session,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> List[dict]:
    """Same split with arms and legs rolled up (Biceps + Triceps -> Arms, etc.)."""
    volumes: Dict[str, float] = {}
    for row in calculate_muscle_split(session, catalog):
        group = MUSCLE_SPLIT_ROLLUP.get(row['muscle_group'], row['muscle_group'])
        volumes[group] = volumes.get(group, 0.0) + row['volume']
    return _split_from_volumes(volumes)


def workout_muscle_groups(
    session: Session,
    limit: int = 3,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> str:
    """Short title such as "Chest, Arms, Shoulders"; "Workout" when nothing qualifies."""
    top = [row['muscle_group'] for row in calculate_muscle_split_grouped(session, catalog)[:limit]]
    return ', '.join(top) if top else 'Workout'
