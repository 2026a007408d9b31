import threading
import pytest
from datetime import datetime, timezone

from strength_engine.cache import ResultCache, history_version
from strength_engine.models import Session, Set, WorkoutExercise


def _session(session_id, day, weight, user_id="u1"):
    return Session(
        session_id,
        user_id,
        datetime(2024, 5, day, tzinfo=timezone.utc),
        (WorkoutExercise("bench", "Bench Press", (Set(5, weight, 0),)),),
    )


def test_history_version_ignores_order():
    a, b = _session("s1", 1, 60), _session("s2", 2, 65)
    assert history_version([a, b]) == history_version([b, a])

def test_history_version_changes_with_content():
    a, b = _session("s1", 1, 60), _session("s2", 2, 65)
    edited = _session("s2", 2, 67.5)
    assert history_version([a, b]) != history_version([a, edited])
    assert history_version([a]) != history_version([a, b])

def test_history_version_scoped_to_user():
    mine = _session("s1", 1, 60)
    theirs = _session("r1", 1, 200, user_id="u2")
    assert history_version([mine, theirs], user_id="u1") == history_version([mine], user_id="u1")


def test_get_or_compute_computes_once():
    cache = ResultCache()
    calls = []

    def compute():
        calls.append(1)
        return {'total_prs': 1, 'per_exercise': []}

    assert cache.get_or_compute(("u1", "s1", "v1"), compute) == {'total_prs': 1, 'per_exercise': []}
    assert cache.get_or_compute(("u1", "s1", "v1"), compute) == {'total_prs': 1, 'per_exercise': []}
    assert len(calls) == 1
    assert cache.stats() == {'entries': 1, 'hits': 1, 'misses': 1}

def test_new_history_version_is_a_miss():
    cache = ResultCache()
    cache.set(("u1", "s1", "v1"), {'total_prs': 1})
    assert cache.get(("u1", "s1", "v2")) is None

def test_cached_values_are_isolated_from_callers():
    cache = ResultCache()
    value = {'per_exercise': [{'prs': []}]}
    cache.set("k", value)
    value['per_exercise'].append({'prs': ['mutated']})
    fetched = cache.get("k")
    fetched['per_exercise'].clear()
    assert cache.get("k") == {'per_exercise': [{'prs': []}]}

def test_least_recently_used_entry_is_evicted():
    cache = ResultCache(max_entries=2)
    cache.set("a", {'v': 1})
    cache.set("b", {'v': 2})
    cache.get("a")
    cache.set("c", {'v': 3})
    assert cache.get("b") is None
    assert cache.get("a") == {'v': 1}
    assert len(cache) == 2

def test_clear_cache():
    cache = ResultCache()
    cache.set("a", {'v': 1})
    cache.clear_cache()
    assert len(cache) == 0
    assert cache.get("a") is None

def test_invalid_size():
    with pytest.raises(ValueError):
        ResultCache(max_entries=0)

def test_concurrent_access():
    cache = ResultCache(max_entries=50)

    def worker(offset):
        for i in range(200):
            key = (offset + i) % 80
            cache.get_or_compute(key, lambda key=key: {'key': key})

    threads = [threading.Thread(target=worker, args=(n * 7,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 50
    for key in range(80):
        cached = cache.get(key)
        assert cached is None or cached == {'key': key}
