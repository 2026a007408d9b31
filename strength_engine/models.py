"""
Input records consumed by the strength engine.

Sessions, exercises and sets arrive from the persistence layer as JSON-ish
dicts. They are parsed once into frozen dataclasses so every computation
downstream works on immutable, validated data.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional


class InvalidPayloadError(ValueError):
    """Raised when caller-supplied session or profile data cannot be parsed."""


@dataclass(frozen=True)
class Set:
    """One completed set. ``weight=None`` means a bodyweight-only set."""

    reps: Optional[int]
    weight: Optional[float]
    set_index: int = 0
    is_warmup: bool = False

    def __post_init__(self) -> None:
        for name in ('reps', 'weight'):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number")
        if self.reps is not None and self.reps != int(self.reps):
            raise ValueError("reps must be a whole number")
        if self.reps is not None and self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight is not None and self.weight < 0:
            raise ValueError("weight must be non-negative")

    @property
    def is_usable(self) -> bool:
        """Working set with at least one rep; the only kind PRs and 1RMs look at."""
        return not self.is_warmup and self.reps is not None and self.reps >= 1

    @property
    def is_weighted(self) -> bool:
        return self.weight is not None and self.weight > 0


@dataclass(frozen=True)
class WorkoutExercise:
    exercise_id: Optional[str]
    exercise_name: str
    sets: tuple = ()
    muscle_group: Optional[str] = None
    gif_url: Optional[str] = None

    @property
    def key(self) -> str:
        # Exercises without a catalog id fall back to their logged name
        return self.exercise_id or f"name:{self.exercise_name}"


@dataclass(frozen=True)
class Session:
    session_id: str
    user_id: Optional[str]
    created_at: datetime
    exercises: tuple = ()


@dataclass(frozen=True)
class Profile:
    gender: Optional[str] = None
    weight_kg: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return (
            self.gender in ('male', 'female')
            and self.weight_kg is not None
            and self.weight_kg > 0
        )


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def parse_timestamp(value: Any) -> datetime:
    """Return ``value`` as a timezone-aware datetime (naive values are UTC)."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError as e:
            raise InvalidPayloadError(f"Invalid timestamp '{value}'") from e
    else:
        raise InvalidPayloadError(f"Invalid timestamp {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_number(value: Any, name: str, cast=float):
    """
    Parse an optional finite number. With ``cast=int`` only whole values are
    accepted (5 or 5.0, never 5.9).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidPayloadError(f"'{name}' must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidPayloadError(f"'{name}' must be numeric") from e
    if not math.isfinite(number):
        raise InvalidPayloadError(f"'{name}' must be a finite number")
    if cast is int:
        if not number.is_integer():
            raise InvalidPayloadError(f"'{name}' must be a whole number")
        return int(number)
    return cast(number)


def set_from_dict(data: dict, position: int = 0) -> Set:
    if not isinstance(data, dict):
        raise InvalidPayloadError("Each set must be an object")
    reps = parse_number(data.get('reps'), 'reps', int)
    weight = parse_number(data.get('weight'), 'weight', float)
    set_index = parse_number(_pick(data, 'set_index', 'setIndex'), 'set_index', int)
    try:
        return Set(
            reps=reps,
            weight=weight,
            set_index=position if set_index is None else set_index,
            is_warmup=bool(_pick(data, 'is_warmup', 'isWarmup', default=False)),
        )
    except ValueError as e:
        raise InvalidPayloadError(str(e)) from e


def exercise_from_dict(data: dict) -> WorkoutExercise:
    if not isinstance(data, dict):
        raise InvalidPayloadError("Each exercise must be an object")
    name = _pick(data, 'exercise_name', 'exerciseName', 'name')
    if not name or not isinstance(name, str):
        raise InvalidPayloadError("Exercise is missing 'exercise_name'")
    raw_sets = data.get('sets') or []
    if not isinstance(raw_sets, list):
        raise InvalidPayloadError("'sets' must be a list")
    exercise_id = _pick(data, 'exercise_id', 'exerciseId')
    return WorkoutExercise(
        exercise_id=str(exercise_id) if exercise_id is not None else None,
        exercise_name=name,
        sets=tuple(set_from_dict(s, i) for i, s in enumerate(raw_sets)),
        muscle_group=_pick(data, 'muscle_group', 'muscleGroup'),
        gif_url=_pick(data, 'gif_url', 'gifUrl'),
    )


def session_from_dict(data: dict) -> Session:
    if not isinstance(data, dict):
        raise InvalidPayloadError("Each session must be an object")
    session_id = _pick(data, 'session_id', 'sessionId', 'id')
    if session_id is None:
        raise InvalidPayloadError("Session is missing 'session_id'")
    raw_exercises = _pick(data, 'exercises', 'workout_exercises', default=[]) or []
    if not isinstance(raw_exercises, list):
        raise InvalidPayloadError("'exercises' must be a list")
    user_id = _pick(data, 'user_id', 'userId')
    return Session(
        session_id=str(session_id),
        user_id=str(user_id) if user_id is not None else None,
        created_at=parse_timestamp(_pick(data, 'created_at', 'createdAt')),
        exercises=tuple(exercise_from_dict(e) for e in raw_exercises),
    )


def sort_sessions(sessions: Iterable[Session]) -> List[Session]:
    """Chronological order; ties broken by session id so ordering is stable."""
    return sorted(sessions, key=lambda s: (s.created_at, s.session_id))


def sessions_from_payload(raw_sessions: Any) -> List[Session]:
    if raw_sessions is None:
        return []
    if not isinstance(raw_sessions, list):
        raise InvalidPayloadError("'sessions' must be a list")
    return sort_sessions(session_from_dict(s) for s in raw_sessions)


def profile_from_dict(data: Optional[dict]) -> Profile:
    if data is None:
        return Profile()
    if not isinstance(data, dict):
        raise InvalidPayloadError("'profile' must be an object")
    gender = data.get('gender')
    weight_kg = parse_number(
        _pick(data, 'weight_kg', 'weightKg', 'bodyweight_kg'), 'weight_kg', float
    )
    return Profile(
        gender=gender.lower() if isinstance(gender, str) else None,
        weight_kg=weight_kg,
    )
