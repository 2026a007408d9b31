from flask import Flask, jsonify
import os
import logging
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from strength_engine.cache import DEFAULT_MAX_ENTRIES, ResultCache
from strength_engine.models import InvalidPayloadError

app = Flask(__name__)

# --- Rate Limiter Configuration ---
# Point at a shared store (e.g. redis://host:6379/1) when running several workers
RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
RATELIMIT_DEFAULTS = [
    limit.strip()
    for limit in os.getenv("RATELIMIT_DEFAULTS", "200 per day;50 per hour").split(";")
    if limit.strip()
]
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=RATELIMIT_DEFAULTS,
    storage_uri=RATELIMIT_STORAGE_URL,
    strategy="fixed-window",
)
limiter.init_app(app)

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
# Use app.logger directly as it's configured by Flask
logger = app.logger

# PR results per (user_id, session_id, history_version)
pr_cache = ResultCache(int(os.getenv("PR_CACHE_SIZE", DEFAULT_MAX_ENTRIES)))


@app.errorhandler(InvalidPayloadError)
def handle_invalid_payload(e):
    logger.info(f"Rejected payload: {e}")
    return jsonify(error=str(e)), 400


@app.errorhandler(Exception)
def handle_exception(e):
    """Generic exception handler."""
    if isinstance(e, HTTPException):
        # 404, 405, 429 from the limiter, malformed JSON...
        return jsonify(error=e.description), e.code
    app.logger.error(f"Unhandled exception: {e}", exc_info=True)
    return jsonify(error="An internal server error occurred"), 500


@app.route('/health', methods=['GET'])
@limiter.exempt
def health():
    return jsonify(status="ok", cache=pr_cache.stats())


# Import blueprints once the limiter and cache exist
from .blueprints.strength import strength_bp  # noqa: E402

app.register_blueprint(strength_bp)

