from flask import Blueprint, request, jsonify

from ..app import limiter, logger, pr_cache
from strength_engine.aggregation import summarize_lifts, summarize_strength
from strength_engine.cache import history_version
from strength_engine.constants import SUPPORTED_GENDERS
from strength_engine.models import (
    InvalidPayloadError,
    parse_number,
    profile_from_dict,
    session_from_dict,
    sessions_from_payload,
)
from strength_engine.muscle_split import (
    calculate_muscle_split,
    calculate_muscle_split_grouped,
    workout_muscle_groups,
)
from strength_engine.predictions import estimate_1rm, exercise_progress, strength_score_history
from strength_engine.records import compute_prs_for_history, compute_prs_for_session, empty_result
from strength_engine.standards import DEFAULT_CATALOG, get_standards_ladder, get_strength_standard

strength_bp = Blueprint('strength', __name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPayloadError("Request body must be a JSON object")
    return data


def _number(data, key, cast=float, required=True):
    value = data.get(key)
    if value is None and required:
        raise InvalidPayloadError(f"Missing '{key}' in request body")
    return parse_number(value, key, cast)


@strength_bp.route('/v1/predict/1rm/epley', methods=['POST'])
@limiter.limit("60 per minute")
def predict_1rm_epley():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'weight' not in data or 'reps' not in data:
        return jsonify({"error": "Missing 'weight' or 'reps' in request body"}), 400

    weight = _number(data, 'weight')
    reps = _number(data, 'reps', int)
    if weight < 0:
        return jsonify({"error": "'weight' must not be negative."}), 400
    if reps < 1:
        return jsonify({"error": "'reps' must be 1 or greater for Epley prediction."}), 400

    return jsonify({
        "weight_input": weight,
        "reps_input": reps,
        "estimated_1rm_epley": estimate_1rm(weight, reps),
        "units": "same_as_input_weight"
    })


@strength_bp.route('/v1/standards', methods=['GET'])
@limiter.limit("60 per minute")
def list_standards():
    exercises = []
    for name in DEFAULT_CATALOG.names():
        entry = DEFAULT_CATALOG.get(name)
        exercises.append({
            "exercise_name": entry['name'],
            "aliases": entry['aliases'],
            "metric": entry['metric'],
            "muscle_group": entry['muscle_group'],
            "exercise_group": entry['group'],
        })
    return jsonify({"exercises": exercises})


@strength_bp.route('/v1/standards/<path:exercise_name>', methods=['GET'])
@limiter.limit("60 per minute")
def standards_ladder(exercise_name):
    canonical = DEFAULT_CATALOG.canonical_name(exercise_name)
    if canonical is None:
        return jsonify({"error": f"No strength standards for '{exercise_name}'"}), 404

    gender = request.args.get('gender')
    if gender is not None:
        gender = gender.lower()
        if gender not in SUPPORTED_GENDERS:
            return jsonify({"error": "'gender' must be 'male' or 'female'."}), 400
        genders = [gender]
    else:
        genders = list(SUPPORTED_GENDERS)

    return jsonify({
        "exercise_name": canonical,
        "metric": DEFAULT_CATALOG.metric(canonical),
        "standards": {g: get_standards_ladder(canonical, g) for g in genders},
    })


@strength_bp.route('/v1/strength/classify', methods=['POST'])
@limiter.limit("60 per minute")
def classify_lift():
    data = _json_body()
    exercise_name = data.get('exercise_name')
    if not exercise_name or not isinstance(exercise_name, str):
        return jsonify({"error": "Missing 'exercise_name' in request body"}), 400

    profile = profile_from_dict(data)
    one_rep_max = _number(data, 'one_rep_max', required=False)
    if one_rep_max is None and 'weight' in data and 'reps' in data:
        weight = _number(data, 'weight')
        reps = _number(data, 'reps', int)
        if weight < 0 or reps < 1:
            return jsonify({"error": "'weight' must not be negative and 'reps' must be 1 or greater."}), 400
        one_rep_max = estimate_1rm(weight, reps)

    info = get_strength_standard(exercise_name, profile.gender, profile.weight_kg, one_rep_max)
    response = {"exercise_name": exercise_name, "one_rep_max": one_rep_max, "strength": info}
    if info is None:
        if not DEFAULT_CATALOG.has_standards(exercise_name):
            response["reason"] = "unsupported_exercise"
        elif not profile.is_complete:
            response["reason"] = "insufficient_profile"
        else:
            response["reason"] = "invalid_one_rep_max"
    return jsonify(response)


@strength_bp.route('/v1/strength/summary', methods=['POST'])
@limiter.limit("30 per minute")
def strength_summary():
    data = _json_body()
    profile = profile_from_dict(data.get('profile'))
    sessions = sessions_from_payload(data.get('sessions'))
    user_id = data.get('user_id')

    lifts = summarize_lifts(sessions, user_id=user_id)
    summary = summarize_strength(lifts, profile)
    response = {
        "lifts": lifts,
        "strength": summary,
        "strength_score_history": strength_score_history(
            [s for s in sessions if user_id is None or s.user_id == user_id]
        ),
    }
    if summary is None:
        response["reason"] = "insufficient_profile"
    return jsonify(response)


@strength_bp.route('/v1/strength/progress', methods=['POST'])
@limiter.limit("30 per minute")
def strength_progress():
    data = _json_body()
    exercise_id = data.get('exercise_id')
    if not exercise_id:
        return jsonify({"error": "Missing 'exercise_id' in request body"}), 400
    sessions = sessions_from_payload(data.get('sessions'))
    return jsonify({
        "exercise_id": exercise_id,
        "progress": exercise_progress(sessions, str(exercise_id)),
    })


@strength_bp.route('/v1/sessions/prs', methods=['POST'])
@limiter.limit("60 per minute")
def session_prs():
    data = _json_body()
    sessions = sessions_from_payload(data.get('sessions'))
    session_id = data.get('session_id')

    if session_id is None:
        return jsonify({"results": compute_prs_for_history(sessions)})

    session = next((s for s in sessions if s.session_id == str(session_id)), None)
    if session is None or not session.user_id:
        logger.info(f"PR lookup for unknown or anonymous session {session_id}")
        return jsonify(empty_result())

    key = (session.user_id, session.session_id, history_version(sessions, session.user_id))
    result = pr_cache.get_or_compute(key, lambda: compute_prs_for_session(session, sessions))
    return jsonify(result)


@strength_bp.route('/v1/sessions/muscle-split', methods=['POST'])
@limiter.limit("60 per minute")
def session_muscle_split():
    data = _json_body()
    raw_session = data.get('session')
    if raw_session is None:
        return jsonify({"error": "Missing 'session' in request body"}), 400
    session = session_from_dict(raw_session)
    return jsonify({
        "session_id": session.session_id,
        "split": calculate_muscle_split(session),
        "grouped": calculate_muscle_split_grouped(session),
        "title": workout_muscle_groups(session),
    })
