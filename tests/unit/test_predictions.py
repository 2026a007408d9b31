import pytest
from datetime import datetime, timezone

from strength_engine.models import Session, Set, WorkoutExercise
from strength_engine.predictions import (
    estimate_1rm,
    set_estimated_1rm,
    best_estimated_1rm,
    best_reps,
    max_weight_by_reps,
    exercise_progress,
    strength_score_history,
)


def _session(session_id, day, *exercises):
    return Session(
        session_id=session_id,
        user_id="u1",
        created_at=datetime(2024, 1, day, 10, 0, tzinfo=timezone.utc),
        exercises=tuple(exercises),
    )


def _bench(*sets):
    return WorkoutExercise("bench", "Bench Press", tuple(sets))


# --- estimate_1rm ---

def test_epley_known_values():
    # 60 * (1 + 5/30) = 70.0 ; 65 * (1 + 5/30) = 75.833...
    assert estimate_1rm(60, 5) == pytest.approx(70.0)
    assert estimate_1rm(65, 5) == pytest.approx(75.83)
    assert estimate_1rm(100, 10) == pytest.approx(133.33)

@pytest.mark.parametrize("weight", [0, 20, 60.0, 102.5, 250])
def test_single_rep_is_identity(weight):
    assert estimate_1rm(weight, 1) == weight

def test_zero_weight_returns_zero():
    assert estimate_1rm(0, 12) == 0.0

@pytest.mark.parametrize("reps", [0, -1])
def test_invalid_reps_rejected(reps):
    with pytest.raises(ValueError):
        estimate_1rm(100, reps)

def test_negative_weight_rejected():
    with pytest.raises(ValueError):
        estimate_1rm(-5, 5)

def test_monotonic_in_weight():
    weights = [0, 2.5, 20, 40, 60, 62.5, 100, 180]
    for reps in (1, 3, 5, 8, 12, 20):
        estimates = [estimate_1rm(w, reps) for w in weights]
        assert estimates == sorted(estimates)

def test_monotonic_in_reps():
    for weight in (0, 20, 62.5, 100):
        estimates = [estimate_1rm(weight, r) for r in range(1, 31)]
        assert estimates == sorted(estimates)


# --- set helpers ---

def test_set_estimate_skips_warmups_and_bodyweight():
    assert set_estimated_1rm(Set(reps=5, weight=60)) == pytest.approx(70.0)
    assert set_estimated_1rm(Set(reps=5, weight=60, is_warmup=True)) is None
    assert set_estimated_1rm(Set(reps=10, weight=None)) is None
    assert set_estimated_1rm(Set(reps=0, weight=60)) is None
    assert set_estimated_1rm(Set(reps=None, weight=60)) is None

def test_best_estimated_1rm_ignores_warmups():
    sets = [Set(10, 100, 0, is_warmup=True), Set(5, 60, 1), Set(3, 62.5, 2)]
    # 62.5 * 1.1 = 68.75 < 70.0
    assert best_estimated_1rm(sets) == pytest.approx(70.0)
    assert best_estimated_1rm([]) is None

def test_best_reps():
    sets = [Set(12, None, 0), Set(15, None, 1, is_warmup=True), Set(9, None, 2)]
    assert best_reps(sets) == 12
    assert best_reps([Set(0, None)]) is None

def test_max_weight_by_reps():
    sets = [Set(5, 60, 0), Set(5, 65, 1), Set(8, 50, 2), Set(8, 80, 3, is_warmup=True), Set(10, None, 4)]
    assert max_weight_by_reps(sets) == {5: 65, 8: 50}


# --- history helpers ---

def test_exercise_progress_is_a_running_max():
    sessions = [
        _session("s1", 1, _bench(Set(5, 60))),
        _session("s2", 2, WorkoutExercise("squat", "Squat", (Set(5, 100),))),
        _session("s3", 3, _bench(Set(5, 55))),
        _session("s4", 4, _bench(Set(5, 65))),
    ]
    progress = exercise_progress(sessions, "bench")
    assert [p["session_id"] for p in progress] == ["s1", "s3", "s4"]
    assert [p["best_1rm"] for p in progress] == pytest.approx([70.0, 70.0, 75.83])
    assert progress[0]["date"].startswith("2024-01-01")

def test_strength_score_history_sums_all_time_bests():
    sessions = [
        _session("s1", 1, _bench(Set(5, 60))),
        _session("s2", 2, WorkoutExercise("squat", "Squat", (Set(1, 100),))),
        _session("s3", 3, _bench(Set(5, 50))),
    ]
    history = strength_score_history(sessions)
    assert [h["strength_score"] for h in history] == [70, 170, 170]
