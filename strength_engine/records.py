"""
Personal-record detection over a lifter's session history.

Three PR kinds are tracked per exercise:

* ``heaviest-weight`` - a weighted set heavier than anything lifted before;
* ``best-1rm``        - a weighted set whose Epley estimate beats every
                        earlier estimate;
* ``rep-max``         - more reps than ever before at the same weight
                        (bodyweight sets form their own bucket).

Only working sets with at least one rep are considered. History is always
"strictly before" the evaluated session; a PR is current while no later
session of the same lifter has matched or beaten it.
"""
from __future__ import annotations

import logging
from itertools import groupby
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from strength_engine.constants import BODYWEIGHT_BUCKET
from strength_engine.models import (
    InvalidPayloadError,
    Session,
    Set,
    WorkoutExercise,
    session_from_dict,
    sort_sessions,
)
from strength_engine.predictions import set_estimated_1rm

logger = logging.getLogger(__name__)

KIND_HEAVIEST_WEIGHT = 'heaviest-weight'
KIND_BEST_1RM = 'best-1rm'
KIND_REP_MAX = 'rep-max'

SessionLike = Union[Session, Dict[str, Any]]


def empty_result() -> Dict[str, Any]:
    return {'total_prs': 0, 'per_exercise': []}


def weight_bucket(set_: Set):
    """Bucket key for rep-max comparisons; unweighted sets share one bucket."""
    return set_.weight if set_.is_weighted else BODYWEIGHT_BUCKET


def format_weight(weight: float) -> str:
    return f"{weight:g}"


def rep_max_label(weight: Optional[float], reps: int) -> str:
    unit = 'rep' if reps == 1 else 'reps'
    if not weight:
        return f"Bodyweight for {reps} {unit}"
    return f"{format_weight(weight)}kg for {reps} {unit}"


class HistoricalBests:
    """Running maxima for one lifter on one exercise."""

    __slots__ = ('max_weight', 'max_1rm', 'max_reps')

    def __init__(self) -> None:
        self.max_weight: Optional[float] = None
        self.max_1rm: Optional[float] = None
        self.max_reps: Dict[Any, int] = {}

    def add(self, sets: Iterable[Set]) -> None:
        for s in sets:
            if not s.is_usable:
                continue
            bucket = weight_bucket(s)
            if s.reps > self.max_reps.get(bucket, 0):
                self.max_reps[bucket] = s.reps
            if s.is_weighted:
                if self.max_weight is None or s.weight > self.max_weight:
                    self.max_weight = s.weight
                est = set_estimated_1rm(s)
                if self.max_1rm is None or est > self.max_1rm:
                    self.max_1rm = est


def _beats(value, best) -> bool:
    return best is None or value > best


def find_exercise_prs(exercise: WorkoutExercise, bests: Optional[HistoricalBests]) -> List[Dict[str, Any]]:
    """
    PR entries for one exercise of the evaluated session.

    ``bests`` holds the history strictly before the session (None when the
    exercise has never been logged). Every entry starts out current;
    ``mark_current`` downgrades the ones later sessions caught up with.
    """
    bests = bests or HistoricalBests()
    usable = [s for s in exercise.sets if s.is_usable]
    weighted = [s for s in usable if s.is_weighted]
    prs: List[Dict[str, Any]] = []

    heavy = [s for s in weighted if _beats(s.weight, bests.max_weight)]
    if heavy:
        top = max(heavy, key=lambda s: (s.weight, s.reps))
        prs.append({
            'kind': KIND_HEAVIEST_WEIGHT,
            'label': 'Heaviest Weight',
            'set_indices': [s.set_index for s in heavy],
            'is_current': True,
            'weight': top.weight,
            'reps': top.reps,
            'value': top.weight,
            'previous': bests.max_weight,
        })

    estimates = [(s, set_estimated_1rm(s)) for s in weighted]
    strong = [(s, est) for s, est in estimates if _beats(est, bests.max_1rm)]
    if strong:
        top, top_est = max(strong, key=lambda pair: pair[1])
        prs.append({
            'kind': KIND_BEST_1RM,
            'label': 'Best 1RM',
            'set_indices': [s.set_index for s, _ in strong],
            'is_current': True,
            'weight': top.weight,
            'reps': top.reps,
            'value': top_est,
            'previous': bests.max_1rm,
        })

    buckets: Dict[Any, List[Set]] = {}
    for s in usable:
        buckets.setdefault(weight_bucket(s), []).append(s)
    for bucket, sets in buckets.items():
        previous = bests.max_reps.get(bucket)
        winners = [s for s in sets if _beats(s.reps, previous)]
        if not winners:
            continue
        reps = max(s.reps for s in winners)
        weight = None if bucket == BODYWEIGHT_BUCKET else bucket
        prs.append({
            'kind': KIND_REP_MAX,
            'label': rep_max_label(weight, reps),
            'set_indices': [s.set_index for s in winners],
            'is_current': True,
            'weight': weight,
            'reps': reps,
            'value': reps,
            'previous': previous,
        })
    return prs


def mark_current(prs: List[Dict[str, Any]], future: Optional[HistoricalBests]) -> None:
    """Flag PRs that a later session has matched or beaten as no longer current."""
    if future is None:
        return
    for pr in prs:
        if pr['kind'] == KIND_HEAVIEST_WEIGHT:
            best_since = future.max_weight
        elif pr['kind'] == KIND_BEST_1RM:
            best_since = future.max_1rm
        else:
            bucket = pr['weight'] if pr['weight'] else BODYWEIGHT_BUCKET
            best_since = future.max_reps.get(bucket)
        pr['is_current'] = _beats(pr['value'], best_since)


def _build_result(exercise_prs: List[Tuple[WorkoutExercise, List[Dict[str, Any]]]]) -> Dict[str, Any]:
    per_exercise = [
        {
            'exercise_id': exercise.exercise_id,
            'exercise_name': exercise.exercise_name,
            'prs': prs,
        }
        for exercise, prs in exercise_prs
        if prs
    ]
    return {
        'total_prs': sum(len(e['prs']) for e in per_exercise),
        'per_exercise': per_exercise,
    }


def merge_repeated_exercises(session: Session) -> List[WorkoutExercise]:
    """
    One entry per exercise key, in first-logged order. An exercise logged
    twice in a session competes as a single pool of sets.
    """
    merged: Dict[str, WorkoutExercise] = {}
    for exercise in session.exercises:
        first = merged.get(exercise.key)
        if first is None:
            merged[exercise.key] = exercise
        else:
            merged[exercise.key] = WorkoutExercise(
                exercise_id=first.exercise_id,
                exercise_name=first.exercise_name,
                sets=first.sets + tuple(exercise.sets),
                muscle_group=first.muscle_group or exercise.muscle_group,
                gif_url=first.gif_url or exercise.gif_url,
            )
    return list(merged.values())


def _coerce_session(session: Optional[SessionLike]) -> Optional[Session]:
    if session is None or isinstance(session, Session):
        return session
    try:
        return session_from_dict(session)
    except InvalidPayloadError as e:
        logger.warning("Skipping malformed session: %s", e)
        return None


def _is_evaluable(session: Optional[Session]) -> bool:
    return session is not None and bool(session.user_id) and bool(session.exercises)


def compute_prs_for_session(
    session: Optional[SessionLike],
    history: Iterable[SessionLike] = (),
) -> Dict[str, Any]:
    """
    PRs earned in ``session`` relative to the same lifter's ``history``.

    ``history`` may contain any sessions (other lifters, the session itself,
    later sessions); only the lifter's own sessions are used, earlier ones as
    the baseline and later ones to decide ``is_current``. Missing or
    malformed input yields a zero-PR result instead of raising.
    """
    session = _coerce_session(session)
    if not _is_evaluable(session):
        return empty_result()

    before: Dict[str, HistoricalBests] = {}
    after: Dict[str, HistoricalBests] = {}
    for raw in history or ():
        other = _coerce_session(raw)
        if other is None or other.user_id != session.user_id:
            continue
        if other.session_id == session.session_id:
            continue
        if other.created_at < session.created_at:
            target = before
        elif other.created_at > session.created_at:
            target = after
        else:
            continue
        for exercise in other.exercises:
            target.setdefault(exercise.key, HistoricalBests()).add(exercise.sets)

    exercise_prs = []
    for exercise in merge_repeated_exercises(session):
        prs = find_exercise_prs(exercise, before.get(exercise.key))
        mark_current(prs, after.get(exercise.key))
        exercise_prs.append((exercise, prs))
    return _build_result(exercise_prs)


def compute_prs_for_history(sessions: Iterable[SessionLike]) -> Dict[str, Dict[str, Any]]:
    """
    PR results for every session in a feed, keyed by session id.

    One chronological pass accumulates each lifter's running bests and
    evaluates every session against them; one reverse pass accumulates the
    bests of later sessions to settle ``is_current``. Sessions sharing a
    timestamp never count as each other's history.
    """
    parsed = [s for s in (_coerce_session(raw) for raw in sessions or ()) if s is not None]
    results: Dict[str, Dict[str, Any]] = {
        s.session_id: empty_result() for s in parsed if not _is_evaluable(s)
    }
    ordered = sort_sessions(s for s in parsed if _is_evaluable(s))

    pending: Dict[str, List[Tuple[WorkoutExercise, List[Dict[str, Any]]]]] = {}
    running: Dict[Tuple[str, str], HistoricalBests] = {}
    for _, group in groupby(ordered, key=lambda s: s.created_at):
        group = list(group)
        for session in group:
            pending[session.session_id] = [
                (exercise, find_exercise_prs(exercise, running.get((session.user_id, exercise.key))))
                for exercise in merge_repeated_exercises(session)
            ]
        for session in group:
            for exercise in session.exercises:
                running.setdefault((session.user_id, exercise.key), HistoricalBests()).add(exercise.sets)

    future: Dict[Tuple[str, str], HistoricalBests] = {}
    for _, group in groupby(reversed(ordered), key=lambda s: s.created_at):
        group = list(group)
        for session in group:
            for exercise, prs in pending[session.session_id]:
                mark_current(prs, future.get((session.user_id, exercise.key)))
        for session in group:
            for exercise in session.exercises:
                future.setdefault((session.user_id, exercise.key), HistoricalBests()).add(exercise.sets)

    for session in ordered:
        results[session.session_id] = _build_result(pending[session.session_id])
    logger.debug("Computed PRs for %d sessions", len(ordered))
    return results


__all__ = [
    "KIND_HEAVIEST_WEIGHT",
    "KIND_BEST_1RM",
    "KIND_REP_MAX",
    "HistoricalBests",
    "empty_result",
    "rep_max_label",
    "find_exercise_prs",
    "mark_current",
    "merge_repeated_exercises",
    "compute_prs_for_session",
    "compute_prs_for_history",
]
