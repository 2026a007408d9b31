"""Muscle-group, exercise-group and overall lifter-level aggregation."""

from __future__ import annotations

import logging
import math
from statistics import harmonic_mean, mean
from typing import Any, Dict, Iterable, List, Optional, Sequence

from strength_engine.constants import (
    EXERCISE_GROUPS,
    MAX_LEVEL_SCORE,
    METRIC_REPS,
    STRENGTH_LEVELS,
    SUPPORTED_GENDERS,
    WEAKEST_GROUP_MIN_GAP,
)
from strength_engine.models import Profile, Session
from strength_engine.predictions import best_estimated_1rm, best_reps
from strength_engine.standards import (
    DEFAULT_CATALOG,
    ExerciseStandardsCatalog,
    get_strength_standard,
)

logger = logging.getLogger(__name__)

UNGROUPED = 'Other'


def _profile_is_usable(gender: Optional[str], bodyweight_kg: Optional[float]) -> bool:
    return (
        gender in SUPPORTED_GENDERS
        and bodyweight_kg is not None
        and math.isfinite(bodyweight_kg)
        and bodyweight_kg > 0
    )


def score_entry(info: Optional[Dict[str, Any]]) -> Optional[float]:
    """
    Combined score ``level_index + progress / 100`` (1.0 - 7.0), or None.

    A lift still short of the Beginner threshold scores ``progress / 100``
    (0.0 - 1.0), so the score keeps rising with the lift across that threshold.
    Aggregated records carry their exact ``average_score``, which is used as is.
    """
    if not info or info.get('level_index') is None:
        return None
    if info.get('average_score') is not None:
        return info['average_score']
    progress = info.get('progress') or 0.0
    if info.get('meets_threshold') is False:
        return progress / 100
    return info['level_index'] + progress / 100


def level_from_score(score: float) -> Dict[str, Any]:
    """
    Map an averaged score back onto a named level with fractional progress.
    Scores below 1.0 clamp to Beginner with no progress.
    """
    whole = math.floor(score)
    level_index = max(1, min(whole, MAX_LEVEL_SCORE))
    if score >= MAX_LEVEL_SCORE:
        progress = 100.0
        next_level = None
    else:
        progress = max(0.0, (score - whole) * 100) if whole >= 1 else 0.0
        next_level = STRENGTH_LEVELS[level_index]
    return {
        'level': STRENGTH_LEVELS[level_index - 1],
        'level_index': level_index,
        'next_level': next_level,
        'progress': progress,
        'average_score': score,
    }


def _exercise_summary(exercise: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'exercise_id': exercise.get('exercise_id'),
        'exercise_name': exercise.get('exercise_name'),
        'max_1rm': exercise.get('max_1rm'),
        'muscle_group': exercise.get('muscle_group'),
        'gif_url': exercise.get('gif_url'),
    }


def _classify(exercise, gender, bodyweight_kg, catalog):
    return get_strength_standard(
        exercise.get('exercise_name'),
        gender,
        bodyweight_kg,
        exercise.get('max_1rm'),
        catalog=catalog,
    )


def aggregate_muscle_group(
    group_name: str,
    exercises: Sequence[Dict[str, Any]],
    gender: Optional[str],
    bodyweight_kg: Optional[float],
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[Dict[str, Any]]:
    """
    Average the strength scores of the exercises in one group.

    Exercises without standards or without a usable 1RM are left out of the
    score rather than counted as zero. A group with nothing computable comes
    back with ``tracked=False`` and no level. Returns None for an incomplete
    profile.
    """
    if not _profile_is_usable(gender, bodyweight_kg):
        return None

    scores = []
    for exercise in exercises:
        score = score_entry(_classify(exercise, gender, bodyweight_kg, catalog))
        if score is not None:
            scores.append(score)

    result = {
        'group_name': group_name,
        'level': None,
        'level_index': None,
        'next_level': None,
        'progress': 0.0,
        'average_score': None,
        'tracked': bool(scores),
        'lifts_tracked': len(scores),
        'exercises': [_exercise_summary(e) for e in exercises],
    }
    if scores:
        result.update(level_from_score(mean(scores)))
    return result


def _sorted_groups(groups: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    tracked = sorted(
        (g for g in groups if g['tracked']),
        key=lambda g: g['average_score'],
        reverse=True,
    )
    return tracked + [g for g in groups if not g['tracked']]


def aggregate_muscle_groups(
    exercises: Iterable[Dict[str, Any]],
    gender: Optional[str],
    bodyweight_kg: Optional[float],
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[List[Dict[str, Any]]]:
    """Per-muscle-group aggregates, strongest tracked group first."""
    if not _profile_is_usable(gender, bodyweight_kg):
        return None

    by_group: Dict[str, List[Dict[str, Any]]] = {}
    for exercise in exercises:
        group_name = (
            exercise.get('muscle_group')
            or catalog.muscle_group(exercise.get('exercise_name'))
            or UNGROUPED
        )
        by_group.setdefault(group_name, []).append(exercise)

    groups = [
        aggregate_muscle_group(name, members, gender, bodyweight_kg, catalog)
        for name, members in by_group.items()
    ]
    return _sorted_groups(groups)


def aggregate_exercise_groups(
    exercises: Iterable[Dict[str, Any]],
    gender: Optional[str],
    bodyweight_kg: Optional[float],
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[List[Dict[str, Any]]]:
    """Push / Pull / Lower aggregates, always in that order."""
    if not _profile_is_usable(gender, bodyweight_kg):
        return None

    by_group: Dict[str, List[Dict[str, Any]]] = {name: [] for name in EXERCISE_GROUPS}
    for exercise in exercises:
        group_name = catalog.exercise_group(exercise.get('exercise_name'))
        if group_name in by_group:
            by_group[group_name].append(exercise)

    return [
        aggregate_muscle_group(name, by_group[name], gender, bodyweight_kg, catalog)
        for name in EXERCISE_GROUPS
    ]


def find_weakest_group(
    groups: Optional[Iterable[Dict[str, Any]]],
    min_gap: float = 0.0,
) -> Optional[str]:
    """
    Name of the tracked group with the lowest average score.

    With ``min_gap`` set, the weakest group is only reported when the
    strongest tracked group leads it by at least that many levels.
    """
    tracked = [g for g in groups or [] if g.get('tracked')]
    if not tracked:
        return None

    weakest = min(tracked, key=lambda g: g['average_score'])
    if min_gap > 0:
        strongest = max(tracked, key=lambda g: g['average_score'])
        if strongest['average_score'] - weakest['average_score'] < min_gap:
            return None
    return weakest['group_name']


def aggregate_overall_level(entries: Iterable[Optional[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """
    Overall lifter level from per-exercise or per-group ``{level_index, progress}``.

    Entries that are None or untracked are ignored. Returns None when nothing
    is computable; a lifter with no data is never reported as a Beginner.
    """
    scores = [s for s in (score_entry(e) for e in entries) if s is not None]
    if not scores:
        return None
    overall = level_from_score(mean(scores))
    overall['lifts_tracked'] = len(scores)
    return overall


def balanced_level(groups: Optional[Iterable[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Harmonic mean of the tracked exercise-group averages."""
    averages = [g['average_score'] for g in groups or [] if g.get('tracked')]
    if not averages:
        return None
    balanced = level_from_score(harmonic_mean(averages))
    balanced['groups_tracked'] = len(averages)
    return balanced


def summarize_lifts(
    sessions: Iterable[Session],
    user_id: Optional[str] = None,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> List[Dict[str, Any]]:
    """
    Collapse a session history into one record per exercise.

    ``max_1rm`` is the best estimated 1RM, or the best single-set rep count
    for exercises whose standards are measured in reps. Exercises with no
    usable sets are dropped.
    """
    lifts: Dict[str, Dict[str, Any]] = {}
    for session in sessions:
        if user_id is not None and session.user_id != user_id:
            continue
        for exercise in session.exercises:
            entry = lifts.setdefault(exercise.key, {
                'exercise_id': exercise.exercise_id,
                'exercise_name': exercise.exercise_name,
                'max_1rm': None,
                'muscle_group': None,
                'gif_url': None,
            })
            if catalog.metric(exercise.exercise_name) == METRIC_REPS:
                best = best_reps(exercise.sets)
            else:
                best = best_estimated_1rm(exercise.sets)
            if best is not None and (entry['max_1rm'] is None or best > entry['max_1rm']):
                entry['max_1rm'] = best
            entry['muscle_group'] = (
                exercise.muscle_group
                or entry['muscle_group']
                or catalog.muscle_group(exercise.exercise_name)
            )
            entry['gif_url'] = exercise.gif_url or entry['gif_url']

    result = [e for e in lifts.values() if e['max_1rm'] is not None]
    result.sort(key=lambda e: e['max_1rm'], reverse=True)
    return result


def summarize_strength(
    lifts: Sequence[Dict[str, Any]],
    profile: Profile,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[Dict[str, Any]]:
    """
    Full strength picture for a lifter: per-exercise classification,
    muscle-group and Push/Pull/Lower aggregates, overall and balanced levels.

    Returns None when the profile lacks gender or bodyweight.
    """
    if not profile.is_complete:
        logger.info("Strength summary skipped: profile incomplete")
        return None

    gender, bodyweight_kg = profile.gender, profile.weight_kg
    exercises = []
    for lift in lifts:
        entry = _exercise_summary(lift)
        entry['strength'] = _classify(lift, gender, bodyweight_kg, catalog)
        exercises.append(entry)

    muscle_groups = aggregate_muscle_groups(lifts, gender, bodyweight_kg, catalog)
    exercise_groups = aggregate_exercise_groups(lifts, gender, bodyweight_kg, catalog)

    return {
        'exercises': exercises,
        'muscle_groups': muscle_groups,
        'exercise_groups': exercise_groups,
        'overall': aggregate_overall_level(e['strength'] for e in exercises),
        'balanced': balanced_level(exercise_groups),
        'weakest_group': find_weakest_group(muscle_groups),
        'focus_group': find_weakest_group(exercise_groups, WEAKEST_GROUP_MIN_GAP),
    }


__all__ = [
    "score_entry",
    "level_from_score",
    "aggregate_muscle_group",
    "aggregate_muscle_groups",
    "aggregate_exercise_groups",
    "find_weakest_group",
    "aggregate_overall_level",
    "balanced_level",
    "summarize_lifts",
    "summarize_strength",
]
