import math
import pytest

from strength_engine.models import (
    InvalidPayloadError,
    Set,
    parse_number,
    profile_from_dict,
    session_from_dict,
    set_from_dict,
)


@pytest.mark.parametrize("value,cast,expected", [
    (None, float, None),
    (62.5, float, 62.5),
    ("62.5", float, 62.5),
    (5, int, 5),
    (5.0, int, 5),
    ("5", int, 5),
])
def test_parse_number(value, cast, expected):
    assert parse_number(value, 'x', cast) == expected

@pytest.mark.parametrize("value", ["Infinity", "-Infinity", "NaN", math.inf, math.nan])
def test_parse_number_rejects_non_finite(value):
    with pytest.raises(InvalidPayloadError):
        parse_number(value, 'weight')

@pytest.mark.parametrize("value", [5.9, "5.5", 0.1])
def test_whole_numbers_only_for_counts(value):
    with pytest.raises(InvalidPayloadError):
        parse_number(value, 'reps', int)

@pytest.mark.parametrize("value", [True, "heavy", [5], {}])
def test_parse_number_rejects_non_numeric(value):
    with pytest.raises(InvalidPayloadError):
        parse_number(value, 'weight')

@pytest.mark.parametrize("raw", [
    {"reps": 5, "weight": "Infinity"},
    {"reps": 5, "weight": math.nan},
    {"reps": 5.9, "weight": 100},
    {"reps": 5, "weight": 100, "set_index": 1.5},
    {"reps": -1, "weight": 100},
])
def test_set_from_dict_rejects_bad_numbers(raw):
    with pytest.raises(InvalidPayloadError):
        set_from_dict(raw)

def test_set_from_dict_accepts_whole_float_reps():
    s = set_from_dict({"reps": 5.0, "weight": "100"}, position=3)
    assert s.reps == 5
    assert isinstance(s.reps, int)
    assert s.weight == 100.0
    assert s.set_index == 3

@pytest.mark.parametrize("kwargs", [
    {"reps": 5, "weight": math.inf},
    {"reps": 5, "weight": math.nan},
    {"reps": math.inf, "weight": 100},
    {"reps": 5.5, "weight": 100},
])
def test_set_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        Set(**kwargs)

def test_session_with_infinite_weight_is_rejected():
    raw = {
        "session_id": "s1",
        "user_id": "u1",
        "created_at": "2024-03-01T18:00:00Z",
        "exercises": [{"exercise_id": "bench", "exercise_name": "Bench Press",
                       "sets": [{"reps": 5, "weight": "Infinity"}]}],
    }
    with pytest.raises(InvalidPayloadError):
        session_from_dict(raw)

def test_profile_rejects_infinite_bodyweight():
    with pytest.raises(InvalidPayloadError):
        profile_from_dict({"gender": "male", "weight_kg": "Infinity"})
