# Extended Epley Formula for 1RM prediction
# Formula: 1RM = w * (1 + (r / 30))
# Some sources use variations, e.g. Brzycki: w / ( 1.0278 – 0.0278 * r )
# We stick to the common Epley: w * (1 + r / 30)
# For r=1, 1RM = w. r < 1 is rejected; callers filter unusable sets first.

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from strength_engine.models import Session, Set

EPLEY_REP_DIVISOR = 30.0


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Calculates estimated 1 Rep Max (1RM) using the Epley formula.

    Returns ``weight`` unchanged for a single rep and 0.0 for zero weight
    (bodyweight movements). Raises ValueError for reps below 1 or a
    negative weight instead of guessing.
    """
    if reps is None or reps < 1:
        raise ValueError("reps must be 1 or greater for Epley prediction")
    if weight is None or weight < 0:
        raise ValueError("weight must be non-negative")
    if weight == 0:
        return 0.0
    if reps == 1:
        return weight

    estimated_1rm = weight * (1 + (reps / EPLEY_REP_DIVISOR))
    return round(estimated_1rm, 2)


def set_estimated_1rm(set_: Set) -> Optional[float]:
    """Estimated 1RM for a working set, or None when the set can't be scored."""
    if not set_.is_usable or not set_.is_weighted:
        return None
    return estimate_1rm(set_.weight, set_.reps)


def best_estimated_1rm(sets: Iterable[Set]) -> Optional[float]:
    best = None
    for s in sets:
        est = set_estimated_1rm(s)
        if est is not None and (best is None or est > best):
            best = est
    return best


def best_reps(sets: Iterable[Set]) -> Optional[int]:
    """Most reps in a single working set (rep-metric standards such as Pull-Up)."""
    best = None
    for s in sets:
        if s.is_usable and (best is None or s.reps > best):
            best = s.reps
    return best


def max_weight_by_reps(sets: Iterable[Set]) -> Dict[int, float]:
    """Heaviest weight lifted for each rep count across working sets."""
    max_weights: Dict[int, float] = {}
    for s in sets:
        if not s.is_usable or not s.is_weighted:
            continue
        if s.reps not in max_weights or s.weight > max_weights[s.reps]:
            max_weights[s.reps] = s.weight
    return max_weights


def exercise_progress(sessions: Iterable[Session], exercise_id: str) -> List[dict]:
    """
    Running personal-best estimated 1RM for one exercise, one point per session
    that contains it. Sessions must be in chronological order.
    """
    running_max = 0.0
    progress = []
    for session in sessions:
        session_sets = [
            s
            for exercise in session.exercises
            if exercise.key == exercise_id
            for s in exercise.sets
        ]
        if not session_sets:
            continue
        best = best_estimated_1rm(session_sets)
        if best is not None and best > running_max:
            running_max = best
        progress.append({
            'session_id': session.session_id,
            'date': session.created_at.isoformat(),
            'best_1rm': running_max,
        })
    return progress


def strength_score_history(sessions: Iterable[Session]) -> List[dict]:
    """
    Strength score per session: the sum of all-time best estimated 1RMs across
    every exercise logged so far. Sessions must be in chronological order.
    """
    all_time_bests: Dict[str, float] = {}
    history = []
    for session in sessions:
        for exercise in session.exercises:
            best = best_estimated_1rm(exercise.sets)
            if best is not None and best > all_time_bests.get(exercise.key, 0.0):
                all_time_bests[exercise.key] = best
        history.append({
            'session_id': session.session_id,
            'date': session.created_at.isoformat(),
            'strength_score': int(round(sum(all_time_bests.values()))),
        })
    return history


__all__ = [
    "estimate_1rm",
    "set_estimated_1rm",
    "best_estimated_1rm",
    "best_reps",
    "max_weight_by_reps",
    "exercise_progress",
    "strength_score_history",
]
